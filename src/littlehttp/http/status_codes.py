"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes LittleHTTP can put on the wire, plus the ones its error
types map to.

=============================================================================
WHICH CODES, AND WHY SO FEW?
=============================================================================

A single-transaction file server only ever reaches four outcomes:

    ┌──────────────────────────┬──────────────────────────────────────────┐
    │  Status                  │  When                                    │
    ├──────────────────────────┼──────────────────────────────────────────┤
    │  200 OK                  │  GET/HEAD of a regular file              │
    │  404 Not Found           │  GET/HEAD of anything else               │
    │  405 Method Not Allowed  │  POST (nothing here is writable)         │
    │  501 Not Implemented     │  any other method token                  │
    └──────────────────────────┴──────────────────────────────────────────┘

Parse and transfer failures never produce a response, but each error type
still records the status a friendlier server would answer with (400, 413,
500). That keeps logs meaningful and leaves room for a supervisor that
wants to answer "400 Bad Request" instead of hanging up.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    Being an IntEnum, a status compares equal to its number and formats
    as one:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> f"{HTTPStatus.NOT_FOUND.value} {HTTPStatus.NOT_FOUND.phrase}"
        '404 Not Found'
    """

    # 2xx SUCCESS
    OK = 200

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    PAYLOAD_TOO_LARGE = 413

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.0 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── phrase
                      └───────── code
        """
        return _STATUS_PHRASES[self]

    @property
    def status_line(self) -> str:
        """Code and phrase as they appear after the protocol token."""
        return f"{self.value} {self.phrase}"

    @property
    def is_error(self) -> bool:
        """True for 4xx and 5xx."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
}
