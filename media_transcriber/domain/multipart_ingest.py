"""Streaming multipart/form-data parser for transcription requests."""

from collections.abc import AsyncIterator, Mapping

from python_multipart import MultipartParser
from python_multipart.exceptions import FormParserError
from python_multipart.multipart import parse_options_header
from starlette.requests import ClientDisconnect

from ..config import MAX_BYTES, MAX_FIELD_BYTES
from ..exceptions import MalformedBodyError, PayloadTooLargeError, RequestStreamError
from ..logging import setup_logging
from .models import DEFAULT_UPLOAD_FILENAME, IncomingMediaRequest

logger = setup_logging()

SOURCE_URL_FIELD = "insta_url"


def _safe_decode(data: bytes, charset: str = "utf-8") -> str:
    try:
        return data.decode(charset)
    except (UnicodeDecodeError, LookupError):
        return data.decode("latin-1")


class MultipartIngestParser:
    """
    Collects at most one uploaded file and the source URL field from a body.

    The file part is the first part whose Content-Disposition carries a
    filename. Its size is checked on every chunk so an oversized upload is
    rejected before the rest of the body is read.
    """

    def __init__(self, max_bytes: int = MAX_BYTES):
        self._max_bytes = max_bytes
        self._charset = "utf-8"

        self._header_name = b""
        self._header_value = b""
        self._content_disposition: bytes | None = None

        self._field_name = ""
        self._field_data = bytearray()
        self._in_file_part = False
        self._skipping_part = False

        self._file_seen = False
        self._file_buffer: bytearray | None = None
        self._filename = DEFAULT_UPLOAD_FILENAME
        self._source_url: str | None = None
        self._finished = False

    def on_part_begin(self) -> None:
        self._content_disposition = None
        self._field_name = ""
        self._field_data = bytearray()
        self._in_file_part = False
        self._skipping_part = False

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        if self._header_name.lower() == b"content-disposition":
            self._content_disposition = self._header_value
        self._header_name = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        _, options = parse_options_header(self._content_disposition)
        if b"name" not in options and b"filename" not in options:
            raise MalformedBodyError("part without a Content-Disposition name")
        self._field_name = _safe_decode(options.get(b"name", b""), self._charset)

        if b"filename" not in options:
            return

        if self._file_seen:
            logger.info(
                "Ignoring additional file part",
                extra={"field_name": self._field_name},
            )
            self._skipping_part = True
            return

        self._file_seen = True
        self._in_file_part = True
        self._file_buffer = bytearray()
        filename = _safe_decode(options[b"filename"], self._charset).strip()
        if filename:
            self._filename = filename

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._skipping_part:
            return

        chunk = data[start:end]
        if self._in_file_part:
            if len(self._file_buffer) + len(chunk) > self._max_bytes:
                self._file_buffer = None
                raise PayloadTooLargeError(self._max_bytes, "File upload")
            self._file_buffer.extend(chunk)
            return

        if len(self._field_data) + len(chunk) > MAX_FIELD_BYTES:
            raise MalformedBodyError(f"field '{self._field_name}' is too large")
        self._field_data.extend(chunk)

    def on_part_end(self) -> None:
        if self._in_file_part or self._skipping_part:
            return
        if self._field_name == SOURCE_URL_FIELD:
            value = _safe_decode(bytes(self._field_data), self._charset).strip()
            self._source_url = value or None

    def on_end(self) -> None:
        self._finished = True

    async def parse(
        self, headers: Mapping[str, str], stream: AsyncIterator[bytes]
    ) -> IncomingMediaRequest:
        """
        Consumes the body stream and returns what the caller sent.

        Args:
            headers: Request headers; must carry a multipart/form-data content type.
            stream: Async iterator over the raw body chunks.

        Returns:
            The parsed IncomingMediaRequest.

        Raises:
            MalformedBodyError: If the body is not valid multipart data.
            PayloadTooLargeError: If the uploaded file exceeds the byte budget.
            RequestStreamError: If reading the body stream fails.
        """
        content_type, params = parse_options_header(headers.get("content-type"))
        if content_type != b"multipart/form-data":
            raise MalformedBodyError("expected multipart/form-data")
        boundary = params.get(b"boundary")
        if not boundary:
            raise MalformedBodyError("missing boundary")
        charset = params.get(b"charset")
        if charset:
            self._charset = charset.decode("latin-1")

        parser = MultipartParser(
            boundary,
            {
                "on_part_begin": self.on_part_begin,
                "on_part_data": self.on_part_data,
                "on_part_end": self.on_part_end,
                "on_header_field": self.on_header_field,
                "on_header_value": self.on_header_value,
                "on_header_end": self.on_header_end,
                "on_headers_finished": self.on_headers_finished,
                "on_end": self.on_end,
            },
        )

        try:
            async for chunk in stream:
                if chunk:
                    parser.write(chunk)
            parser.finalize()
        except (ClientDisconnect, OSError) as e:
            self._file_buffer = None
            logger.exception("Request body stream failed")
            raise RequestStreamError(e) from e
        except FormParserError as e:
            self._file_buffer = None
            raise MalformedBodyError(str(e), e) from e

        if not self._finished:
            self._file_buffer = None
            raise MalformedBodyError("unexpected end of body")

        file_buffer = bytes(self._file_buffer) if self._file_buffer else None
        logger.info(
            "Multipart body parsed",
            extra={
                "file_size": len(file_buffer) if file_buffer else 0,
                "upload_filename": self._filename,
                "has_source_url": self._source_url is not None,
            },
        )
        return IncomingMediaRequest(
            file_buffer=file_buffer,
            filename=self._filename,
            source_url=self._source_url,
        )


async def parse_media_request(
    headers: Mapping[str, str],
    stream: AsyncIterator[bytes],
    max_bytes: int = MAX_BYTES,
) -> IncomingMediaRequest:
    """Parses a multipart request body into an IncomingMediaRequest."""
    return await MultipartIngestParser(max_bytes).parse(headers, stream)
