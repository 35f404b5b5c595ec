"""Domain models for the media transcription pipeline."""

from pydantic import BaseModel

DEFAULT_UPLOAD_FILENAME = "upload.mp4"
DOWNLOAD_FILENAME = "reel.mp4"


class IncomingMediaRequest(BaseModel, frozen=True):
    """What the caller sent: an uploaded file, a source page URL, or neither."""

    file_buffer: bytes | None = None
    filename: str = DEFAULT_UPLOAD_FILENAME
    source_url: str | None = None

    @property
    def has_upload(self) -> bool:
        return bool(self.file_buffer)


class ResolvedMedia(BaseModel, frozen=True):
    """Media bytes ready to be forwarded to the transcription provider."""

    data: bytes
    filename: str


class TranscriptionResult(BaseModel, frozen=True):
    """Transcript text returned by the provider."""

    text: str
