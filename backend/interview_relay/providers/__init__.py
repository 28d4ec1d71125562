from interview_relay.providers.base import ChatCompletionsClient
from interview_relay.providers.groq import GroqClient

__all__ = ["ChatCompletionsClient", "GroqClient"]
