import logging
import sys
from functools import lru_cache

from pydantic_settings import BaseSettings
from typing import List, Optional


def setup_logging(debug: bool = False):
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Upstream credential (server-side only). Missing key is reported per request.
    groq_api_key: Optional[str] = None

    # Upstream model configuration
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: List[str] = ["*"]

    # Timeout settings (seconds)
    provider_timeout: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process. Used as a FastAPI dependency."""
    settings = Settings()
    if not settings.groq_api_key:
        logger.warning("GROQ_API_KEY is not set; relay requests will fail until it is configured")
    return settings
