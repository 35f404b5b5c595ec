"""httpx implementation of the HttpFetcher interface."""

import anyio
import httpx

from ..exceptions import HttpFetchError, PayloadTooLargeError
from ..logging import setup_logging
from .interfaces import FetchResponse, HttpFetcher

logger = setup_logging()


class HttpxFetcher(HttpFetcher):
    """Sends outbound requests through a shared httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes]] | None = None,
        max_bytes: int | None = None,
        timeout: float | None = None,
    ) -> FetchResponse:
        """
        Sends one request and reads the whole body.

        The timeout bounds the entire call, from connecting until the last
        body byte arrives, not just the gap between reads.

        Raises:
            HttpFetchError: On transport failure or when the deadline passes.
            PayloadTooLargeError: If the body grows past max_bytes.
        """
        request_timeout = httpx.USE_CLIENT_DEFAULT if timeout is None else timeout
        try:
            with anyio.fail_after(timeout):
                async with self._client.stream(
                    method,
                    url,
                    headers=headers,
                    data=data,
                    files=files,
                    timeout=request_timeout,
                ) as response:
                    content = await self._read_body(response, url, max_bytes)
        except (httpx.HTTPError, httpx.InvalidURL, TimeoutError) as e:
            logger.exception(
                "Outbound request failed",
                extra={"url": url, "method": method, "timeout": timeout},
            )
            raise HttpFetchError(url, e) from e

        logger.info(
            "Outbound request completed",
            extra={
                "url": url,
                "method": method,
                "status_code": response.status_code,
                "size": len(content),
            },
        )
        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            content=content,
        )

    async def _read_body(
        self, response: httpx.Response, url: str, max_bytes: int | None
    ) -> bytes:
        """Reads the body, aborting as soon as it grows past max_bytes."""
        if max_bytes is not None:
            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                logger.warning(
                    "Declared response size over limit",
                    extra={"url": url, "content_length": int(declared)},
                )
                raise PayloadTooLargeError(max_bytes, "Response")

        body = bytearray()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            if max_bytes is not None and len(body) > max_bytes:
                logger.warning(
                    "Response body over limit",
                    extra={"url": url, "limit": max_bytes},
                )
                raise PayloadTooLargeError(max_bytes, "Response")
        return bytes(body)

    async def aclose(self) -> None:
        """Closes the underlying client."""
        await self._client.aclose()
