"""FastAPI application entry point."""

import ddtrace.auto  # noqa: F401

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .dependencies import close_fetcher
from .routes import transcribe_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_fetcher()


app = FastAPI(title="Media Transcriber Service", lifespan=lifespan)
app.include_router(transcribe_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Renders framework HTTP errors in the same {"error": ...} shape."""
    if exc.status_code == 405:
        message = "Method Not Allowed. Use POST."
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=exc.headers,
    )
