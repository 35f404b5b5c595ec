"""JSON logging shared by the service and the uvicorn server loggers."""

import logging
import os
import sys

from pythonjsonlogger.json import JsonFormatter

DEFAULT_LOG_LEVEL = "INFO"


def _resolve_level() -> int:
    name = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging():
    """
    Routes the root and uvicorn loggers to one JSON handler on stdout.

    Each record carries timestamp, level, logger name, message, trace_id
    and span_id, so request logs and transcription logs correlate with the
    Datadog trace. The level comes from LOG_LEVEL and falls back to INFO
    when the variable is unset or not a level name.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    level = _resolve_level()
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [stream_handler]

    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        server_logger = logging.getLogger(logger_name)
        server_logger.setLevel(level)
        server_logger.handlers = [stream_handler]
        server_logger.propagate = False

    return root_logger
