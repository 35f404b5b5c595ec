"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod

from ...domain.models import ResolvedMedia, TranscriptionResult


class TranscriptionService(ABC):
    """Abstract base class for transcription backends."""

    @abstractmethod
    async def transcribe(self, media: ResolvedMedia) -> TranscriptionResult:
        """
        Transcribes media bytes and returns the transcript text.

        Args:
            media: The resolved media file.

        Returns:
            The transcription result.

        Raises:
            ConfigurationError: If the provider credentials are missing.
            ProviderError: If the provider call fails.
        """
        pass
