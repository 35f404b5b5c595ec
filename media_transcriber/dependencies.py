"""FastAPI dependency injection configuration."""

import httpx

from .config import AppConfig, load_config
from .domain import MediaUrlExtractor
from .handlers import MediaResolver, TranscriptionHandler
from .infrastructure import HttpxFetcher, OpenAITranscriber
from .infrastructure.interfaces import HttpFetcher, TranscriptionService
from .logging import setup_logging

logger = setup_logging()

_startup_config = load_config()

_http_client = httpx.AsyncClient(
    timeout=httpx.Timeout(_startup_config.fetch.timeout_seconds),
    follow_redirects=True,
)
_fetcher = HttpxFetcher(_http_client)
_extractor = MediaUrlExtractor()

logger.info(
    "HTTP fetcher configured",
    extra={"timeout_seconds": _startup_config.fetch.timeout_seconds},
)


def get_config() -> AppConfig:
    """Returns configuration read from the environment for the current request."""
    return load_config()


def get_fetcher() -> HttpFetcher:
    """Returns the process-wide HTTP fetcher."""
    return _fetcher


def get_transcription_service(
    config: AppConfig, fetcher: HttpFetcher
) -> TranscriptionService:
    """Returns a transcription service bound to the given configuration."""
    return OpenAITranscriber(fetcher, config.provider)


def get_handler(config: AppConfig, fetcher: HttpFetcher) -> TranscriptionHandler:
    """Returns the configured transcription handler."""
    resolver = MediaResolver(fetcher, _extractor, config.fetch)
    return TranscriptionHandler(resolver, get_transcription_service(config, fetcher))


async def close_fetcher() -> None:
    """Closes the process-wide HTTP client."""
    await _fetcher.aclose()
