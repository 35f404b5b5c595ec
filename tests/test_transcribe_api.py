"""Tests for the /api/transcribe endpoint."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from conftest import (
    FakeFetcher,
    build_multipart,
    bytes_response,
    html_response,
    multipart_headers,
)
from fastapi.testclient import TestClient

from media_transcriber.config import MAX_BYTES
from media_transcriber.dependencies import get_fetcher
from media_transcriber.exceptions import RequestStreamError
from media_transcriber.main import app

API_URL = "https://provider.test/v1/audio/transcriptions"
PAGE_URL = "https://www.instagram.com/reel/abc123/"
VIDEO_URL = "https://cdn.example.com/reel.mp4"
OG_PAGE = f'<meta property="og:video" content="{VIDEO_URL}">'

ENV = {"OPENAI_API_KEY": "sk-test", "TRANSCRIPTION_API_URL": API_URL}

client = TestClient(app)


@pytest.fixture
def fetcher():
    fake = FakeFetcher()
    app.dependency_overrides[get_fetcher] = lambda: fake
    with patch.dict("os.environ", ENV):
        yield fake
    app.dependency_overrides.clear()


def post_body(body: bytes):
    return client.post("/api/transcribe", content=body, headers=multipart_headers())


def provider_calls(fetcher):
    return [c for c in fetcher.calls if c["url"] == API_URL]


def test_upload_is_transcribed(fetcher):
    fetcher.responses[API_URL] = bytes_response(API_URL, b'{"text": "hola"}')

    response = post_body(build_multipart(files=[("media", "clip.mp4", b"video")]))

    assert response.status_code == 200
    assert response.json() == {"transcript": "hola"}
    assert fetcher.calls[0]["files"] == {"file": ("clip.mp4", b"video")}


def test_upload_via_test_client_files(fetcher):
    fetcher.responses[API_URL] = bytes_response(API_URL, b'{"transcript": "hola"}')

    response = client.post(
        "/api/transcribe", files={"file": ("clip.mp4", b"video", "video/mp4")}
    )

    assert response.status_code == 200
    assert response.json() == {"transcript": "hola"}


def test_source_url_is_scraped_downloaded_and_transcribed(fetcher):
    fetcher.responses.update(
        {
            PAGE_URL: html_response(PAGE_URL, OG_PAGE),
            VIDEO_URL: bytes_response(VIDEO_URL, b"reel-bytes"),
            API_URL: bytes_response(API_URL, b'{"text": "hola"}'),
        }
    )

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 200
    assert response.json() == {"transcript": "hola"}
    assert [c["url"] for c in fetcher.calls] == [PAGE_URL, VIDEO_URL, API_URL]
    assert fetcher.calls[-1]["files"] == {"file": ("reel.mp4", b"reel-bytes")}


def test_get_is_method_not_allowed(fetcher):
    response = client.get("/api/transcribe")

    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed. Use POST."}


def test_missing_api_key_is_server_error(fetcher):
    with patch.dict("os.environ", {"OPENAI_API_KEY": ""}):
        response = post_body(build_multipart(files=[("file", "a.mp4", b"video")]))

    assert response.status_code == 500
    assert "OPENAI_API_KEY" in response.json()["error"]
    assert fetcher.calls == []


def test_oversized_upload_is_rejected_without_network(fetcher):
    body = build_multipart(files=[("file", "big.mp4", b"\0" * (MAX_BYTES + 1))])

    response = post_body(body)

    assert response.status_code == 400
    assert "exceeded limit" in response.json()["error"]
    assert fetcher.calls == []


def test_no_media_is_client_error_without_network(fetcher):
    response = post_body(build_multipart(fields={"other": "value"}))

    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded and no insta_url provided"}
    assert fetcher.calls == []


def test_non_multipart_body_is_client_error(fetcher):
    response = client.post("/api/transcribe", json={"insta_url": PAGE_URL})

    assert response.status_code == 400
    assert fetcher.calls == []


def test_source_page_failure_is_client_error(fetcher):
    fetcher.responses[PAGE_URL] = html_response(PAGE_URL, "<html>login</html>", 403)

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 400
    assert response.json() == {
        "error": "Failed to fetch source page; ensure URL is public"
    }
    assert "login" not in response.text


def test_page_without_video_never_calls_provider(fetcher):
    fetcher.responses[PAGE_URL] = html_response(PAGE_URL, "<html></html>")

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 400
    assert response.json() == {"error": "Could not find a video URL on the page"}
    assert provider_calls(fetcher) == []


def test_page_with_meta_tag_and_malformed_blob_succeeds(fetcher):
    page = OG_PAGE + "<script>window._sharedData = {not: json};</script>"
    fetcher.responses.update(
        {
            PAGE_URL: html_response(PAGE_URL, page),
            VIDEO_URL: bytes_response(VIDEO_URL, b"reel-bytes"),
            API_URL: bytes_response(API_URL, b'{"text": "hola"}'),
        }
    )

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 200
    assert response.json() == {"transcript": "hola"}


def test_media_download_failure_is_bad_gateway(fetcher):
    fetcher.responses.update(
        {
            PAGE_URL: html_response(PAGE_URL, OG_PAGE),
            VIDEO_URL: bytes_response(VIDEO_URL, b"gone", 410),
        }
    )

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 502
    assert provider_calls(fetcher) == []


def test_download_over_budget_is_client_error(fetcher):
    fetcher.responses.update(
        {
            PAGE_URL: html_response(PAGE_URL, OG_PAGE),
            VIDEO_URL: bytes_response(VIDEO_URL, b"\0" * (MAX_BYTES + 1)),
        }
    )

    response = post_body(build_multipart(fields={"insta_url": PAGE_URL}))

    assert response.status_code == 400
    assert response.json() == {
        "error": f"Downloaded video exceeded limit of {MAX_BYTES} bytes"
    }
    assert VIDEO_URL not in response.text
    assert provider_calls(fetcher) == []


def test_body_stream_failure_is_client_error(fetcher):
    with patch(
        "media_transcriber.routes.transcribe.parse_media_request",
        new_callable=AsyncMock,
        side_effect=RequestStreamError(OSError("connection reset")),
    ):
        response = post_body(build_multipart(files=[("file", "a.mp4", b"video")]))

    assert response.status_code == 400
    assert response.json() == {"error": "Failed to read request body"}
    assert fetcher.calls == []


def test_provider_unauthorized_is_relayed_without_retry(fetcher):
    provider_body = json.dumps({"error": {"message": "Incorrect API key"}})
    fetcher.responses[API_URL] = bytes_response(API_URL, provider_body.encode(), 401)

    response = post_body(build_multipart(files=[("file", "a.mp4", b"video")]))

    assert response.status_code == 502
    assert response.json() == {
        "error": "Transcription failed",
        "provider_status": 401,
        "provider_body": provider_body,
    }
    assert len(provider_calls(fetcher)) == 1


def test_provider_response_without_known_fields_is_serialized(fetcher):
    payload = {"result": {"words": ["hola"]}}
    fetcher.responses[API_URL] = bytes_response(API_URL, json.dumps(payload).encode())

    response = post_body(build_multipart(files=[("file", "a.mp4", b"video")]))

    assert response.status_code == 200
    assert response.json() == {"transcript": json.dumps(payload)}


def test_unexpected_error_is_generic_server_error(fetcher):
    with patch(
        "media_transcriber.handlers.transcription_handler.TranscriptionHandler.process",
        new_callable=AsyncMock,
        side_effect=RuntimeError("secret detail"),
    ):
        response = post_body(build_multipart(files=[("file", "a.mp4", b"video")]))

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "secret detail" not in response.text
