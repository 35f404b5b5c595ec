"""Transcription endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import AppConfig
from ..dependencies import get_config, get_fetcher, get_handler
from ..domain import parse_media_request
from ..exceptions import (
    ConfigurationError,
    InvalidSourceUrlError,
    MalformedBodyError,
    MediaDownloadError,
    MediaUrlNotFoundError,
    NoMediaProvidedError,
    PayloadTooLargeError,
    ProviderError,
    RequestStreamError,
    SourcePageFetchError,
)
from ..handlers import TranscriptionHandler
from ..infrastructure.interfaces import HttpFetcher
from ..logging import setup_logging
from ..response_models import ErrorResponse, TranscriptResponse

logger = setup_logging()

router = APIRouter(prefix="/api", tags=["transcription"])

ConfigDep = Annotated[AppConfig, Depends(get_config)]
FetcherDep = Annotated[HttpFetcher, Depends(get_fetcher)]


def _get_handler(config: ConfigDep, fetcher: FetcherDep) -> TranscriptionHandler:
    """Dependency that builds a handler around the shared fetcher."""
    return get_handler(config, fetcher)


HandlerDep = Annotated[TranscriptionHandler, Depends(_get_handler)]


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    payload = ErrorResponse(error=message, **extra)
    return JSONResponse(
        status_code=status_code, content=payload.model_dump(exclude_none=True)
    )


@router.post(
    "/transcribe",
    response_model=TranscriptResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def transcribe(request: Request, config: ConfigDep, handler: HandlerDep):
    """
    Transcribes an uploaded media file or the video behind a post URL.

    Expects multipart/form-data with an optional file part and an optional
    "insta_url" field. The uploaded file wins when both are sent.
    """
    try:
        config.provider.require_api_key()
        incoming = await parse_media_request(request.headers, request.stream())
        result = await handler.process(incoming)
    except ConfigurationError as e:
        logger.error("Configuration error", extra={"setting": e.setting})
        return _error(500, str(e))
    except MalformedBodyError as e:
        logger.warning("Malformed request body", extra={"reason": e.reason})
        return _error(400, "Invalid multipart/form-data body")
    except RequestStreamError:
        return _error(400, "Failed to read request body")
    except PayloadTooLargeError as e:
        logger.warning(
            "Payload too large", extra={"source": e.source, "limit": e.limit}
        )
        return _error(400, f"{e.source} exceeded limit of {e.limit} bytes")
    except NoMediaProvidedError:
        return _error(400, "No file uploaded and no insta_url provided")
    except InvalidSourceUrlError:
        return _error(400, "insta_url must be an absolute http(s) URL")
    except SourcePageFetchError:
        return _error(400, "Failed to fetch source page; ensure URL is public")
    except MediaUrlNotFoundError:
        return _error(400, "Could not find a video URL on the page")
    except MediaDownloadError:
        return _error(502, "Failed to download video")
    except ProviderError as e:
        return _error(
            502,
            "Transcription failed",
            provider_status=e.status_code,
            provider_body=e.body,
        )
    except Exception:
        logger.exception("Unhandled error while transcribing")
        return _error(500, "Internal server error")

    return TranscriptResponse(transcript=result.text)
