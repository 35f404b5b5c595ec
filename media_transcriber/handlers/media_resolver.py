"""Turns an upload-or-URL request into media bytes ready for transcription."""

from urllib.parse import urlparse

from ..config import MAX_BYTES, FetchConfig
from ..domain import IncomingMediaRequest, MediaUrlExtractor, ResolvedMedia
from ..domain.models import DOWNLOAD_FILENAME
from ..exceptions import (
    HttpFetchError,
    InvalidSourceUrlError,
    MediaDownloadError,
    MediaUrlNotFoundError,
    NoMediaProvidedError,
    PayloadTooLargeError,
    SourcePageFetchError,
)
from ..infrastructure.interfaces import HttpFetcher
from ..logging import setup_logging

logger = setup_logging()

MAX_LOGGED_BODY_CHARS = 300


class MediaResolver:
    """Resolves the media to transcribe from an upload or a source page."""

    def __init__(
        self,
        fetcher: HttpFetcher,
        extractor: MediaUrlExtractor,
        config: FetchConfig,
        max_bytes: int = MAX_BYTES,
    ):
        self._fetcher = fetcher
        self._extractor = extractor
        self._config = config
        self._max_bytes = max_bytes

    async def resolve(self, request: IncomingMediaRequest) -> ResolvedMedia:
        """
        Returns the uploaded file, or downloads the video behind the source URL.

        Args:
            request: The parsed incoming request.

        Returns:
            ResolvedMedia holding the bytes and a filename.

        Raises:
            NoMediaProvidedError: If there is neither an upload nor a URL.
            InvalidSourceUrlError: If the source URL is not http(s).
            SourcePageFetchError: If the source page cannot be fetched.
            MediaUrlNotFoundError: If no video URL is found on the page.
            MediaDownloadError: If the video download fails.
            PayloadTooLargeError: If the source page or video exceeds the byte budget.
        """
        if request.has_upload:
            return ResolvedMedia(data=request.file_buffer, filename=request.filename)

        if not request.source_url:
            raise NoMediaProvidedError()

        source_url = request.source_url
        if urlparse(source_url).scheme not in ("http", "https"):
            raise InvalidSourceUrlError(source_url)

        html = await self._fetch_page(source_url)

        media_url = self._extractor.extract(html)
        if not media_url:
            logger.warning("No video URL found on page", extra={"url": source_url})
            raise MediaUrlNotFoundError(source_url)

        logger.info(
            "Video URL extracted",
            extra={"source_url": source_url, "media_url": media_url},
        )

        data = await self._download(media_url)
        return ResolvedMedia(data=data, filename=DOWNLOAD_FILENAME)

    async def _fetch_page(self, url: str) -> str:
        logger.info("Fetching source page", extra={"url": url})
        try:
            response = await self._fetcher.fetch(
                url,
                headers=self._headers(),
                max_bytes=self._max_bytes,
                timeout=self._config.timeout_seconds,
            )
        except HttpFetchError as e:
            raise SourcePageFetchError(url, cause=e) from e
        except PayloadTooLargeError as e:
            logger.warning("Source page over size limit", extra={"url": url})
            raise PayloadTooLargeError(e.limit, "Source page") from e

        if not response.ok:
            logger.error(
                "Failed fetching source page",
                extra={
                    "url": url,
                    "status_code": response.status_code,
                    "body": response.text[:MAX_LOGGED_BODY_CHARS],
                },
            )
            raise SourcePageFetchError(url, response.status_code)

        return response.text

    async def _download(self, url: str) -> bytes:
        try:
            response = await self._fetcher.fetch(
                url,
                headers=self._headers(),
                max_bytes=self._max_bytes,
                timeout=self._config.timeout_seconds,
            )
        except HttpFetchError as e:
            raise MediaDownloadError(url, cause=e) from e
        except PayloadTooLargeError as e:
            logger.warning("Downloaded video over size limit", extra={"url": url})
            raise PayloadTooLargeError(e.limit, "Downloaded video") from e

        if not response.ok:
            logger.error(
                "Failed downloading video",
                extra={
                    "url": url,
                    "status_code": response.status_code,
                    "body": response.text[:MAX_LOGGED_BODY_CHARS],
                },
            )
            raise MediaDownloadError(url, response.status_code)

        if not response.content:
            logger.error("Downloaded video is empty", extra={"url": url})
            raise MediaDownloadError(url, response.status_code)

        logger.info(
            "Video downloaded",
            extra={"url": url, "size": len(response.content)},
        )
        return response.content

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": self._config.user_agent}
