"""Domain layer exports."""

from .media_url_extractor import (
    MediaUrlExtractor,
    find_og_video_url,
    find_shared_data_video_url,
)
from .models import IncomingMediaRequest, ResolvedMedia, TranscriptionResult
from .multipart_ingest import parse_media_request

__all__ = [
    "IncomingMediaRequest",
    "ResolvedMedia",
    "TranscriptionResult",
    "MediaUrlExtractor",
    "find_og_video_url",
    "find_shared_data_video_url",
    "parse_media_request",
]
