"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Reads exactly one HTTP/1.x request from a binary stream and turns it into
an HTTPRequest.

=============================================================================
STREAM PARSING, NOT BUFFER PARSING
=============================================================================

The parser never sees "the whole request". It pulls from a file-like
object (sys.stdin.buffer, socket.makefile("rb"), io.BytesIO) one line at
a time, then reads the body by count:

    stream                              parser
    ──────                              ──────
    GET /index.html HTTP/1.0\r\n  ◄──── readline()   request line
    Host: localhost\r\n           ◄──── readline()   header
    Content-Length: 5\r\n         ◄──── readline()   header
    \r\n                          ◄──── readline()   end of headers
    hello                         ◄──── read(5)      body

Nothing is read past the declared body, so the stream is left positioned
exactly after the request.

=============================================================================
GRAMMAR (deliberately minimal)
=============================================================================

    request-line = METHOD SP PATH SP "HTTP/1." DIGIT EOL
    header-line  = NAME ":" [ SP / HTAB ]* VALUE EOL
    EOL          = CRLF / LF

    - METHOD is upper-cased, so "get" dispatches like "GET".
    - PATH is kept raw: no percent-decoding, no query splitting,
      no ".." normalization.
    - Only the minor version is kept; the major is always 1.

=============================================================================
FAILURES
=============================================================================

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ Input                        │ Raised                               │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ empty stream                 │ TruncatedStream                      │
    │ "GET /x"                     │ MalformedRequestLine                 │
    │ "GET /x HTTP/2.0"            │ MalformedRequestLine                 │
    │ "Host localhost"             │ MalformedHeaderField                 │
    │ "Content-Length: -1" / "abc" │ MalformedHeaderField                 │
    │ EOF before blank line        │ TruncatedStream                      │
    │ "Content-Length: 2000000"    │ BodyTooLarge (body never read)       │
    │ body shorter than declared   │ TruncatedStream                      │
    └──────────────────────────────┴──────────────────────────────────────┘

=============================================================================
"""

import logging
import re
import string
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .errors import (
    BodyTooLarge,
    MalformedHeaderField,
    MalformedRequestLine,
    TruncatedStream,
)
from .headers import HeaderField, HeaderFields


logger = logging.getLogger(__name__)

# ISO-8859-1 maps every byte to one code point, so decoding never fails
# and the raw octets of a path survive intact.
HEADER_ENCODING = "iso-8859-1"

DEFAULT_MAX_BODY_LENGTH = 1024 * 1024
DEFAULT_MAX_LINE_LENGTH = 4096


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:                 Upper-cased method token ("GET", "PATCH", ...)
                                Any token is accepted here; deciding what
                                to do with it is the dispatcher's job.

        path:                   Raw request target, exactly as sent
                                "/docs/a%20b.txt" stays percent-encoded.

        protocol_minor_version: The N in "HTTP/1.N". Echoed back in the
                                response status line.

        headers:                HeaderFields, last-declared first.

        body:                   Request body, or None when Content-Length
                                was absent or zero.

        body_length:            Value of Content-Length (0 if absent).

    =========================================================================
    """

    method: str
    path: str
    protocol_minor_version: int = 0
    headers: HeaderFields = field(default_factory=HeaderFields)
    body: Optional[bytes] = None
    body_length: int = 0

    @property
    def version(self) -> str:
        """Protocol token as it appears on the wire, e.g. "HTTP/1.0"."""
        return f"HTTP/1.{self.protocol_minor_version}"

    @property
    def is_head(self) -> bool:
        """HEAD requests get headers only, whatever the outcome."""
        return self.method == "HEAD"

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup with a default."""
        value = self.headers.lookup(name)
        return default if value is None else value


class RequestParser:
    """
    Parses one request from a binary input stream.

    ==========================================================================
    PARSER FLOW
    ==========================================================================

        Input stream
              │
              ▼
        ┌───────────────────────────────────────────────────────────────────┐
        │  1. Request line    METHOD SP PATH SP HTTP/1.d                    │
        │     │  EOF → TruncatedStream, bad shape → MalformedRequestLine    │
        │     ▼                                                             │
        │  2. Header lines    until a bare EOL                              │
        │     │  no colon → MalformedHeaderField, EOF → TruncatedStream     │
        │     ▼                                                             │
        │  3. Content-Length  absent → 0                                    │
        │     │  not a non-negative integer → MalformedHeaderField          │
        │     │  over the ceiling → BodyTooLarge                            │
        │     ▼                                                             │
        │  4. Body            read(n) until n bytes or EOF                  │
        │        short → TruncatedStream                                    │
        └───────────────────────────────────────────────────────────────────┘
              │
              ▼
        HTTPRequest

    ==========================================================================
    """

    # "HTTP/1." is matched case-insensitively; exactly one digit follows.
    PROTOCOL_PATTERN = re.compile(r"HTTP/1\.(\d)", re.IGNORECASE)
    CONTENT_LENGTH_PATTERN = re.compile(r"[0-9]+")
    # ASCII only: a-z change, Latin-1 letters such as "ß" stay as sent
    METHOD_UPPERCASE = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

    def __init__(
        self,
        max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
    ):
        """
        Args:
            max_body_length: Largest acceptable Content-Length in bytes.
            max_line_length: Longest acceptable line, terminator included.
        """
        self.max_body_length = max_body_length
        self.max_line_length = max_line_length

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Read and parse one request.

        Args:
            stream: Readable binary stream supporting readline() and read().

        Returns:
            The parsed HTTPRequest.

        Raises:
            MalformedRequestLine, MalformedHeaderField, BodyTooLarge,
            TruncatedStream
        """
        method, path, minor = self._read_request_line(stream)
        headers = self._read_headers(stream)

        body_length = self._content_length(headers)
        body = self._read_body(stream, body_length) if body_length else None

        logger.debug(
            f"Parsed {method} {path} HTTP/1.{minor} "
            f"({len(headers)} headers, {body_length} body bytes)"
        )

        return HTTPRequest(
            method=method,
            path=path,
            protocol_minor_version=minor,
            headers=headers,
            body=body,
            body_length=body_length,
        )

    # =========================================================================
    # LINE READING
    # =========================================================================

    def _readline(self, stream: BinaryIO, error_type: type) -> Optional[str]:
        """
        Read one line and strip its terminator.

        Returns None at end of stream. A line that fills the whole buffer
        without reaching LF is too long and raises `error_type`.
        """
        raw = stream.readline(self.max_line_length)
        if not raw:
            return None
        if not raw.endswith(b"\n") and len(raw) >= self.max_line_length:
            raise error_type(f"line exceeds {self.max_line_length} bytes")

        line = raw.decode(HEADER_ENCODING)
        if line.endswith("\r\n"):
            return line[:-2]
        if line.endswith("\n"):
            return line[:-1]
        return line

    def _read_request_line(self, stream: BinaryIO) -> tuple[str, str, int]:
        """
        Split "METHOD SP PATH SP HTTP/1.d" into its three parts.

        Splitting is on single spaces, first one then the next, so a path
        containing no spaces and a protocol token with no trailing junk
        are required.
        """
        line = self._readline(stream, MalformedRequestLine)
        if line is None:
            raise TruncatedStream("no request line")

        method, sep, rest = line.partition(" ")
        if not sep or not method:
            raise MalformedRequestLine(f"parse error on request line (method): {line!r}")

        path, sep, protocol = rest.partition(" ")
        if not sep or not path:
            raise MalformedRequestLine(f"parse error on request line (path): {line!r}")

        match = self.PROTOCOL_PATTERN.fullmatch(protocol)
        if match is None:
            raise MalformedRequestLine(f"parse error on request line (protocol): {line!r}")

        return method.translate(self.METHOD_UPPERCASE), path, int(match.group(1))

    def _read_headers(self, stream: BinaryIO) -> HeaderFields:
        headers = HeaderFields()

        while True:
            line = self._readline(stream, MalformedHeaderField)
            if line is None:
                raise TruncatedStream("stream ended inside the header block")
            if not line:
                return headers

            name, sep, value = line.partition(":")
            if not sep:
                raise MalformedHeaderField(f"parse error on request header field: {line!r}")
            if not name:
                raise MalformedHeaderField(f"empty header name: {line!r}")

            headers.prepend(HeaderField(name, value.lstrip(" \t")))

    # =========================================================================
    # BODY
    # =========================================================================

    def _content_length(self, headers: HeaderFields) -> int:
        """
        Body length declared by Content-Length, validated.

        Only plain decimal digits are accepted: "-1", "+5", "0x10" and
        "five" are all MalformedHeaderField.
        """
        value = headers.lookup("Content-Length")
        if value is None:
            return 0

        value = value.strip()
        if not self.CONTENT_LENGTH_PATTERN.fullmatch(value):
            raise MalformedHeaderField(f"invalid Content-Length value: {value!r}")

        length = int(value)
        if length > self.max_body_length:
            raise BodyTooLarge(length, self.max_body_length)
        return length

    def _read_body(self, stream: BinaryIO, length: int) -> bytes:
        # read(n) on a raw or unbuffered stream may return fewer bytes
        # than asked for without being at EOF
        chunks = []
        remaining = length
        while remaining > 0:
            chunk = stream.read(remaining)
            if not chunk:
                raise TruncatedStream(
                    f"failed to read request body: got {length - remaining} of {length} bytes"
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def parse_request(
    stream: BinaryIO,
    max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
) -> HTTPRequest:
    """
    Parse one request from `stream` with a throwaway RequestParser.

    Example:
        >>> import io
        >>> req = parse_request(io.BytesIO(b"get /a HTTP/1.1\\r\\n\\r\\n"))
        >>> (req.method, req.path, req.protocol_minor_version)
        ('GET', '/a', 1)
    """
    parser = RequestParser(max_body_length=max_body_length, max_line_length=max_line_length)
    return parser.parse(stream)
