"""Application configuration loaded from environment variables."""

import os

from pydantic import BaseModel

from .exceptions import ConfigurationError

MAX_BYTES = 25 * 1024 * 1024
MAX_FIELD_BYTES = 64 * 1024

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class ProviderConfig(BaseModel, frozen=True):
    """Transcription provider configuration."""

    api_key: str = ""
    api_url: str = "https://api.openai.com/v1/audio/transcriptions"
    model: str = "whisper-1"
    source_language: str = "es"
    timeout_seconds: float = 120.0

    def require_api_key(self) -> str:
        """Returns the API key, raising ConfigurationError when it is missing."""
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY")
        return self.api_key


class FetchConfig(BaseModel, frozen=True):
    """Outbound fetch configuration for source pages and media downloads."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = 15.0


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    provider: ProviderConfig
    fetch: FetchConfig


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        provider=ProviderConfig(
            api_key=os.getenv("OPENAI_API_KEY", "").strip(),
            api_url=os.getenv(
                "TRANSCRIPTION_API_URL",
                "https://api.openai.com/v1/audio/transcriptions",
            ),
            model=os.getenv("TRANSCRIPTION_MODEL", "whisper-1"),
            source_language=os.getenv("TRANSCRIPTION_SOURCE_LANGUAGE", "es"),
            timeout_seconds=float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "120")),
        ),
        fetch=FetchConfig(
            user_agent=os.getenv("SOURCE_USER_AGENT", DEFAULT_USER_AGENT),
            timeout_seconds=float(os.getenv("SOURCE_FETCH_TIMEOUT_SECONDS", "15")),
        ),
    )
