import httpx

from interview_relay.config import Settings
from interview_relay.providers.base import ChatCompletionsClient


class GroqClient(ChatCompletionsClient):
    """Groq chat completions (OpenAI-compatible)."""

    name = "groq"
    display_name = "Groq"
    base_url = "https://api.groq.com/openai/v1"
    api_key_env = "GROQ_API_KEY"

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient) -> "GroqClient":
        return cls(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            http_client=http_client,
            base_url=settings.groq_base_url,
            temperature=settings.temperature,
        )
