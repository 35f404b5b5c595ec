"""Media transcriber: transcribe an uploaded video or the video behind a post URL."""

__version__ = "0.1.0"
