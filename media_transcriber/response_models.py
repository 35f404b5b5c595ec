"""Response models for the media-transcriber API."""

from pydantic import BaseModel


class TranscriptResponse(BaseModel):
    """Response returned after a successful transcription."""

    transcript: str


class ErrorResponse(BaseModel):
    """Error payload; provider fields are only set for provider failures."""

    error: str
    provider_status: int | None = None
    provider_body: str | None = None
