"""Infrastructure interface exports."""

from .http_fetcher import FetchResponse, HttpFetcher
from .transcription_service import TranscriptionService

__all__ = ["FetchResponse", "HttpFetcher", "TranscriptionService"]
