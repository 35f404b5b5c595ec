"""Handler layer exports."""

from .media_resolver import MediaResolver
from .transcription_handler import TranscriptionHandler

__all__ = ["MediaResolver", "TranscriptionHandler"]
