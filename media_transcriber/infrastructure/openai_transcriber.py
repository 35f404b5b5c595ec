"""OpenAI-compatible implementation of the TranscriptionService interface."""

import json
from typing import Any

from ..config import ProviderConfig
from ..domain.models import ResolvedMedia, TranscriptionResult
from ..exceptions import HttpFetchError, ProviderError
from ..logging import setup_logging
from .interfaces import HttpFetcher, TranscriptionService

logger = setup_logging()

MAX_ERROR_BODY_CHARS = 1000


class OpenAITranscriber(TranscriptionService):
    """Forwards media to an OpenAI-style /audio/transcriptions endpoint."""

    def __init__(self, fetcher: HttpFetcher, config: ProviderConfig):
        self._fetcher = fetcher
        self._config = config

    async def transcribe(self, media: ResolvedMedia) -> TranscriptionResult:
        """
        Uploads the media as multipart form data and reads the transcript.

        The transcript comes from the "text" field, then "transcript", and
        falls back to the whole JSON body so a successful call always
        yields a string.
        """
        api_key = self._config.require_api_key()

        logger.info(
            "Sending media to transcription provider",
            extra={
                "media_filename": media.filename,
                "size": len(media.data),
                "model": self._config.model,
            },
        )

        try:
            response = await self._fetcher.fetch(
                self._config.api_url,
                method="POST",
                headers={"Authorization": f"Bearer {api_key}"},
                data={
                    "model": self._config.model,
                    "translate": "true",
                    "language": self._config.source_language,
                },
                files={"file": (media.filename, media.data)},
                timeout=self._config.timeout_seconds,
            )
        except HttpFetchError as e:
            raise ProviderError(None, "", e) from e

        if not response.ok:
            body = response.text[:MAX_ERROR_BODY_CHARS]
            logger.error(
                "Transcription provider returned an error",
                extra={"status_code": response.status_code, "body": body},
            )
            raise ProviderError(response.status_code, body)

        try:
            payload = response.json()
        except ValueError as e:
            logger.exception(
                "Transcription provider returned invalid JSON",
                extra={"status_code": response.status_code},
            )
            raise ProviderError(
                response.status_code, response.text[:MAX_ERROR_BODY_CHARS], e
            ) from e

        text = _extract_transcript(payload)
        logger.info("Transcription successful", extra={"transcript_chars": len(text)})
        return TranscriptionResult(text=text)


def _extract_transcript(payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("text", "transcript"):
            if isinstance(payload.get(key), str):
                return payload[key]
    return json.dumps(payload)
