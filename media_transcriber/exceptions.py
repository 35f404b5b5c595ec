"""Custom exceptions for the media-transcriber service."""


class ConfigurationError(Exception):
    """Raised when a required setting is missing from the environment."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Server misconfigured: {setting} missing")


class MalformedBodyError(Exception):
    """Raised when the request body is not valid multipart/form-data."""

    def __init__(self, reason: str, cause: Exception | None = None):
        self.reason = reason
        self.cause = cause
        super().__init__(f"Malformed multipart body: {reason}")


class RequestStreamError(Exception):
    """Raised when reading the request body stream fails."""

    def __init__(self, cause: Exception | None = None):
        self.cause = cause
        super().__init__("Failed to read request body")


class PayloadTooLargeError(Exception):
    """Raised when an upload or a download exceeds the byte budget."""

    def __init__(self, limit: int, source: str):
        self.limit = limit
        self.source = source
        super().__init__(f"{source} exceeded limit of {limit} bytes")


class NoMediaProvidedError(Exception):
    """Raised when a request carries neither a file nor a source URL."""

    def __init__(self):
        super().__init__("No file uploaded and no source URL provided")


class InvalidSourceUrlError(Exception):
    """Raised when the source URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid source URL '{url}'")


class HttpFetchError(Exception):
    """Raised when an outbound HTTP request fails at the transport level."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Request to '{url}' failed")


class UpstreamFetchError(Exception):
    """Raised when a source page or media download is unreachable or non-success."""

    def __init__(
        self,
        url: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"Failed to fetch '{url}' (status {status_code})")


class SourcePageFetchError(UpstreamFetchError):
    """Raised when the source page cannot be fetched."""


class MediaDownloadError(UpstreamFetchError):
    """Raised when the resolved media URL cannot be downloaded."""


class MediaUrlNotFoundError(Exception):
    """Raised when no extraction strategy finds a media URL on the page."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No video URL found on page '{url}'")


class ProviderError(Exception):
    """Raised when the transcription provider call fails."""

    def __init__(
        self,
        status_code: int | None,
        body: str = "",
        cause: Exception | None = None,
    ):
        self.status_code = status_code
        self.body = body
        self.cause = cause
        super().__init__(f"Transcription provider failed (status {status_code})")
