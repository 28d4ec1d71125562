import logging
from typing import Any, List, Optional

import httpx
import orjson

from interview_relay.utils.exceptions import (
    ConfigurationError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# Constants
CHAT_COMPLETIONS_PATH = "/chat/completions"
DEFAULT_TEMPERATURE = 0.7


class ChatCompletionsClient:
    """Client for an OpenAI-compatible chat-completions endpoint.

    Subclasses set `name`, `display_name`, `base_url` and `api_key_env`.
    One upstream attempt per call; no retries at this layer.
    """

    name: str = ""  # Override in subclass
    display_name: str = ""  # Used in error messages, e.g. "Groq API Error: 429 - ..."
    base_url: str = ""  # Override in subclass
    api_key_env: str = ""  # Environment variable the credential comes from

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        http_client: httpx.AsyncClient,
        base_url: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self._client = http_client
        if base_url:
            self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}{CHAT_COMPLETIONS_PATH}"

    def is_configured(self) -> bool:
        """Check if client has an API key"""
        return bool(self.api_key)

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(f"{self.api_key_env} is not set")
        return self.api_key

    def _build_request(self, messages: List[dict], stream: bool) -> httpx.Request:
        api_key = self._require_api_key()
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": stream,
            "temperature": self.temperature,
        }
        return self._client.build_request(
            "POST",
            self.url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            content=orjson.dumps(payload),
        )

    async def _send(self, request: httpx.Request, stream: bool) -> httpx.Response:
        try:
            return await self._client.send(request, stream=stream)
        except httpx.TransportError as e:
            logger.error(f"{self.display_name} connection failed: {e!r}")
            raise UpstreamError(None, f"connection failed: {e}", provider=self.display_name) from e

    async def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise UpstreamError with the raw body text for non-2xx responses."""
        if response.is_success:
            return
        try:
            body = (await response.aread()).decode("utf-8", errors="replace")
        finally:
            await response.aclose()
        logger.error(
            f"{self.display_name} API error for model '{self.model}': "
            f"status={response.status_code}, error={body}"
        )
        raise UpstreamError(response.status_code, body, provider=self.display_name)

    async def complete(self, messages: List[dict]) -> Any:
        """
        Run a non-streaming chat completion.

        Args:
            messages: Ordered list of {"role", "content"} dicts

        Returns:
            The parsed JSON response body
        """
        request = self._build_request(messages, stream=False)
        response = await self._send(request, stream=False)
        await self._raise_for_status(response)

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise UpstreamError(
                response.status_code,
                f"invalid JSON body ({e})",
                provider=self.display_name,
            ) from e

    async def open_stream(self, messages: List[dict]) -> httpx.Response:
        """
        Open a streaming chat completion.

        The returned response is open and unread; the caller owns it and
        must `aclose()` it once reading is finished or abandoned.
        """
        request = self._build_request(messages, stream=True)
        response = await self._send(request, stream=True)
        await self._raise_for_status(response)

        if response.headers.get("content-length") == "0":
            await response.aclose()
            raise UpstreamError(None, "empty stream", provider=self.display_name)

        return response
