"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every way a transaction can fail, as distinct exception types.

    HTTPError
    ├── HTTPParseError            request could not be read
    │   ├── MalformedRequestLine  "GET /x" (no protocol), "GET /x FTP/1.0"
    │   ├── MalformedHeaderField  "Host localhost", "Content-Length: -1"
    │   ├── TruncatedStream       peer hung up before the promised bytes
    │   └── BodyTooLarge          Content-Length over the ceiling
    └── IOTransferError           file read / socket write failed mid-reply

=============================================================================
FAIL FAST, BUT DON'T EXIT
=============================================================================

All of these are fatal for the connection: nothing is retried and, for
parse errors, no response is written at all. What they are NOT is fatal
for the process. Raising a typed exception instead of calling sys.exit()
lets a supervisor serving many connections drop the one bad request and
carry on, while a one-shot (inetd style) invocation simply turns the
exception into exit status 1.

Each error carries the HTTP status a production server would answer with.
LittleHTTP never sends it, but it makes log lines self-explanatory.

=============================================================================
"""

from .status_codes import HTTPStatus


class HTTPError(Exception):
    """
    Base class for every LittleHTTP failure.

    Attributes:
        status_code: The HTTPStatus this failure corresponds to.
    """

    default_status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: HTTPStatus | None = None):
        super().__init__(message)
        self.status_code = status_code or self.default_status

    @property
    def kind(self) -> str:
        """Short name of the failure, used in log lines."""
        return type(self).__name__


class HTTPParseError(HTTPError):
    """The request could not be parsed; nothing has been written yet."""

    default_status = HTTPStatus.BAD_REQUEST


class MalformedRequestLine(HTTPParseError):
    """Request line is missing a delimiter or has a bad protocol token."""


class MalformedHeaderField(HTTPParseError):
    """Header line without a colon, or an unusable Content-Length."""


class TruncatedStream(HTTPParseError):
    """Stream ended before the request line, header block or body did."""


class BodyTooLarge(HTTPParseError):
    """Declared Content-Length exceeds the configured maximum."""

    default_status = HTTPStatus.PAYLOAD_TOO_LARGE

    def __init__(self, length: int, limit: int):
        super().__init__(f"request body too long: {length} > {limit} bytes")
        self.length = length
        self.limit = limit


class IOTransferError(HTTPError):
    """
    Reading the resolved file or writing the response failed.

    Once a Content-Length has gone out there is no way to repair the
    response, so the connection is abandoned. The underlying OSError is
    chained as __cause__.
    """
