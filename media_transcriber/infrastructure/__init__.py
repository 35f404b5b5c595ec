"""Infrastructure layer exports."""

from .httpx_fetcher import HttpxFetcher
from .openai_transcriber import OpenAITranscriber

__all__ = ["HttpxFetcher", "OpenAITranscriber"]
