"""Handler for transcribing an incoming media request."""

from ..domain import IncomingMediaRequest, TranscriptionResult
from ..infrastructure.interfaces import TranscriptionService
from ..logging import setup_logging
from .media_resolver import MediaResolver

logger = setup_logging()


class TranscriptionHandler:
    """Orchestrates media resolution followed by transcription."""

    def __init__(
        self,
        resolver: MediaResolver,
        transcription_service: TranscriptionService,
    ):
        self._resolver = resolver
        self._transcription_service = transcription_service

    async def process(self, request: IncomingMediaRequest) -> TranscriptionResult:
        """
        Resolves the media for a request and transcribes it.

        Args:
            request: The parsed incoming request.

        Returns:
            TranscriptionResult with the transcript text.

        Raises:
            Any error raised by MediaResolver.resolve or
            TranscriptionService.transcribe.
        """
        logger.info(
            "Processing transcription request",
            extra={
                "has_upload": request.has_upload,
                "source_url": request.source_url,
            },
        )

        media = await self._resolver.resolve(request)

        result = await self._transcription_service.transcribe(media)

        logger.info(
            "Transcription request processed",
            extra={"media_filename": media.filename, "transcript_chars": len(result.text)},
        )

        return result
