"""Abstract interface for outbound HTTP requests."""

import json
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class FetchResponse(BaseModel, frozen=True):
    """A fully read HTTP response."""

    url: str
    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


class HttpFetcher(ABC):
    """Abstract base class for the process-wide networking capability."""

    @abstractmethod
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
        Sends a request and reads the whole response body.

        Args:
            url: Absolute URL to request.
            method: HTTP method.
            headers: Extra request headers.
            data: Form fields sent with the request.
            files: File parts as {field: (filename, bytes)}; sent as multipart.
            max_bytes: Abort once the response body grows past this size.
            timeout: Per-request timeout in seconds, overriding the default.

        Returns:
            The response with its body, whatever the status code.

        Raises:
            HttpFetchError: If the request fails at the transport level or times out.
            PayloadTooLargeError: If the body exceeds max_bytes.
        """
