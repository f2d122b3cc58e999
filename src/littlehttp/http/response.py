"""
=============================================================================
HTTP RESPONSE EMITTER
=============================================================================

Writes one complete, correctly framed HTTP/1.x response to a binary
output stream.

=============================================================================
RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     LITTLEHTTP RESPONSE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  HTTP/1.0 200 OK\r\n                    ← minor version echoed      │
    │  Date: Mon, 19 Oct 2026 09:30:00 GMT\r\n                            │
    │  Server: LittleHTTP/1.0\r\n             ← common to every outcome   │
    │  Connection: close\r\n                                              │
    │  Content-Length: 1234\r\n               ← outcome-specific          │
    │  Content-Type: text/plain\r\n                                       │
    │  \r\n                                                               │
    │  <file bytes, 1 KiB at a time>          ← omitted for HEAD          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
THE FOUR OUTCOMES
=============================================================================

    ┌────────────────────────┬─────────────────────────┬──────────────────┐
    │ Outcome                │ Extra headers           │ Body             │
    ├────────────────────────┼─────────────────────────┼──────────────────┤
    │ 200 serve file         │ Content-Length, -Type   │ the file         │
    │ 404 not found          │ Content-Type: text/html │ HTML notice      │
    │ 405 method not allowed │ Content-Type: text/html │ names the method │
    │ 501 not implemented    │ Content-Type: text/html │ names the method │
    └────────────────────────┴─────────────────────────┴──────────────────┘

Error notices carry no Content-Length: "Connection: close" means the end
of the body is the end of the connection.

=============================================================================
STREAMING INSTEAD OF BUILDING
=============================================================================

Nothing is assembled in memory first. Headers go straight to the stream
and the file is copied block by block, so serving a 1 GB file costs one
1 KiB buffer. The price is that a failure halfway through cannot be
turned into an error response: the status line and Content-Length are
already on the wire. Such failures raise IOTransferError and the caller
drops the connection.

=============================================================================
"""

import html
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Callable, Optional

from .errors import IOTransferError
from .request import HEADER_ENCODING, HTTPRequest
from .status_codes import HTTPStatus

if TYPE_CHECKING:
    from ..handlers.static import FileInfo


logger = logging.getLogger(__name__)

DEFAULT_SERVER_HEADER = "LittleHTTP/1.0"
DEFAULT_BLOCK_SIZE = 1024


class Outcome(Enum):
    """The mutually exclusive responses a request can end in."""

    SERVE_FILE = HTTPStatus.OK
    NOT_FOUND = HTTPStatus.NOT_FOUND
    METHOD_NOT_ALLOWED = HTTPStatus.METHOD_NOT_ALLOWED
    NOT_IMPLEMENTED = HTTPStatus.NOT_IMPLEMENTED

    @property
    def status(self) -> HTTPStatus:
        return self.value


# =============================================================================
# NOTICE PAGES
# =============================================================================

NOT_FOUND_PAGE = (
    "<html>\r\n"
    "<head><title>404 Not Found</title></head>\r\n"
    "<body><p>File not found</p></body>\r\n"
    "</html>\r\n"
)

METHOD_NOT_ALLOWED_PAGE = (
    "<html>\r\n"
    "<head>\r\n"
    "<title>405 Method Not Allowed</title>\r\n"
    "</head>\r\n"
    "<body>\r\n"
    "<p>The request method {method} is not allowed</p>\r\n"
    "</body>\r\n"
    "</html>\r\n"
)

NOT_IMPLEMENTED_PAGE = (
    "<html>\r\n"
    "<head>\r\n"
    "<title>501 Not Implemented</title>\r\n"
    "</head>\r\n"
    "<body>\r\n"
    "<p>The request method {method} is not implemented</p>\r\n"
    "</body>\r\n"
    "</html>\r\n"
)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an RFC 1123 HTTP-date.

    Example: Mon, 19 Oct 2026 09:30:00 GMT

    Day and month names are spelled out here rather than taken from
    strftime(), whose %a/%b follow the process locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    dt = dt.astimezone(timezone.utc)
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseEmitter:
    """
    Writes responses for one connection's output stream.

    One emitter serves one request: it remembers the status it sent and
    how many bytes went out, which is what the access log reports.

    =========================================================================
    USAGE
    =========================================================================

        emitter = ResponseEmitter(sys.stdout.buffer)
        emitter.not_found(request)          # writes, flushes
        emitter.status, emitter.bytes_sent  # (HTTPStatus.NOT_FOUND, 187)

    =========================================================================
    """

    def __init__(
        self,
        out: BinaryIO,
        server_header: str = DEFAULT_SERVER_HEADER,
        block_size: int = DEFAULT_BLOCK_SIZE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            out: Writable binary stream. Flushed, never closed.
            server_header: Value of the Server header ("name/version").
            block_size: Chunk size for file copies.
            clock: Returns the current time for the Date header; injectable
                   so tests can pin it.
        """
        self.out = out
        self.server_header = server_header
        self.block_size = block_size
        self.clock = clock or _utcnow

        self.status: Optional[HTTPStatus] = None
        self.bytes_sent = 0

    # =========================================================================
    # OUTCOMES
    # =========================================================================

    def serve_file(self, request: HTTPRequest, info: "FileInfo", content_type: str) -> Outcome:
        """
        200 OK with the file as body (headers only for HEAD).

        The file is opened before anything is written, so an unreadable
        file still leaves the output stream untouched.

        Raises:
            IOTransferError: opening, reading or writing failed.
        """
        try:
            source = open(info.path, "rb")
        except OSError as e:
            raise IOTransferError(f"failed to open {info.path}: {e.strerror}") from e

        with source:
            self._write_head(request, HTTPStatus.OK, [
                ("Content-Length", str(info.size)),
                ("Content-Type", content_type),
            ])
            if not request.is_head:
                self._copy_body(source, info.path)

        self._flush()
        return Outcome.SERVE_FILE

    def not_found(self, request: HTTPRequest) -> Outcome:
        """404 with a fixed HTML notice."""
        self._write_notice(request, HTTPStatus.NOT_FOUND, NOT_FOUND_PAGE)
        return Outcome.NOT_FOUND

    def method_not_allowed(self, request: HTTPRequest) -> Outcome:
        """405 naming the rejected method."""
        page = METHOD_NOT_ALLOWED_PAGE.format(method=html.escape(request.method))
        self._write_notice(request, HTTPStatus.METHOD_NOT_ALLOWED, page)
        return Outcome.METHOD_NOT_ALLOWED

    def not_implemented(self, request: HTTPRequest) -> Outcome:
        """501 naming the unrecognized method."""
        page = NOT_IMPLEMENTED_PAGE.format(method=html.escape(request.method))
        self._write_notice(request, HTTPStatus.NOT_IMPLEMENTED, page)
        return Outcome.NOT_IMPLEMENTED

    # =========================================================================
    # FRAMING
    # =========================================================================

    def common_headers(self) -> list[tuple[str, str]]:
        """Headers every response carries, in wire order."""
        return [
            ("Date", format_http_date(self.clock())),
            ("Server", self.server_header),
            ("Connection", "close"),
        ]

    def _write_head(
        self,
        request: HTTPRequest,
        status: HTTPStatus,
        extra_headers: list[tuple[str, str]],
    ) -> None:
        """Status line, common headers, extra headers and the blank line."""
        lines = [f"HTTP/1.{request.protocol_minor_version} {status.status_line}"]
        for name, value in self.common_headers() + extra_headers:
            lines.append(f"{name}: {value}")
        lines.append("")

        self.status = status
        self._write(("\r\n".join(lines) + "\r\n").encode(HEADER_ENCODING))

    def _write_notice(self, request: HTTPRequest, status: HTTPStatus, page: str) -> None:
        self._write_head(request, status, [("Content-Type", "text/html")])
        if not request.is_head:
            self._write(page.encode("utf-8"))
        self._flush()

    def _copy_body(self, source: BinaryIO, path: str) -> None:
        while True:
            try:
                chunk = source.read(self.block_size)
            except OSError as e:
                raise IOTransferError(f"failed to read {path}: {e.strerror}") from e
            if not chunk:
                return
            self._write(chunk)

    def _write(self, data: bytes) -> None:
        try:
            self.out.write(data)
        except OSError as e:
            raise IOTransferError(f"failed to write response: {e}") from e
        self.bytes_sent += len(data)

    def _flush(self) -> None:
        try:
            self.out.flush()
        except OSError as e:
            raise IOTransferError(f"failed to flush response: {e}") from e
