"""Shared fixtures for media-transcriber tests."""

import os

os.environ.setdefault("DD_TRACE_ENABLED", "false")
os.environ.setdefault("DD_INSTRUMENTATION_TELEMETRY_ENABLED", "false")

import pytest  # noqa: E402

from media_transcriber.config import FetchConfig, ProviderConfig  # noqa: E402
from media_transcriber.exceptions import (  # noqa: E402
    HttpFetchError,
    PayloadTooLargeError,
)
from media_transcriber.infrastructure.interfaces import (  # noqa: E402
    FetchResponse,
    HttpFetcher,
)

BOUNDARY = "----mediatranscriberboundary"


def build_multipart(
    fields: dict[str, str] | None = None,
    files: list[tuple[str, str | None, bytes]] | None = None,
    boundary: str = BOUNDARY,
) -> bytes:
    """Builds a multipart/form-data body. A None filename omits the attribute."""
    lines = []
    for name, value in (fields or {}).items():
        lines.append(f"--{boundary}\r\n".encode())
        lines.append(f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode())
        lines.append(value.encode() + b"\r\n")
    for name, filename, data in files or []:
        lines.append(f"--{boundary}\r\n".encode())
        disposition = f'Content-Disposition: form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        lines.append(f"{disposition}\r\n".encode())
        lines.append(b"Content-Type: application/octet-stream\r\n\r\n")
        lines.append(data + b"\r\n")
    lines.append(f"--{boundary}--\r\n".encode())
    return b"".join(lines)


def multipart_headers(boundary: str = BOUNDARY) -> dict[str, str]:
    return {"content-type": f"multipart/form-data; boundary={boundary}"}


async def stream_of(body: bytes, chunk_size: int = 1024):
    for i in range(0, len(body), chunk_size):
        yield body[i : i + chunk_size]


class FakeFetcher(HttpFetcher):
    """Returns scripted responses by URL and records every call."""

    def __init__(self, responses: dict | None = None):
        self.responses = dict(responses or {})
        self.calls: list[dict] = []

    async def fetch(
        self,
        url,
        *,
        method="GET",
        headers=None,
        data=None,
        files=None,
        max_bytes=None,
        timeout=None,
    ):
        self.calls.append(
            {
                "url": url,
                "method": method,
                "headers": headers,
                "data": data,
                "files": files,
                "max_bytes": max_bytes,
                "timeout": timeout,
            }
        )
        if url not in self.responses:
            raise HttpFetchError(url, Exception("no scripted response"))
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        if max_bytes is not None and len(outcome.content) > max_bytes:
            raise PayloadTooLargeError(max_bytes, "Response")
        return outcome


def html_response(url: str, html: str, status_code: int = 200) -> FetchResponse:
    return FetchResponse(url=url, status_code=status_code, content=html.encode())


def bytes_response(url: str, data: bytes, status_code: int = 200) -> FetchResponse:
    return FetchResponse(url=url, status_code=status_code, content=data)


@pytest.fixture
def fetch_config() -> FetchConfig:
    return FetchConfig(user_agent="TestBrowser/1.0", timeout_seconds=5.0)


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        api_key="sk-test",
        api_url="https://provider.test/v1/audio/transcriptions",
        model="whisper-1",
        source_language="es",
        timeout_seconds=30.0,
    )
