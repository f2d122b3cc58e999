"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything that knows what HTTP/1.x looks like on the wire: reading a
request off a byte stream and writing one of the four responses back.

=============================================================================
MODULE COMPONENTS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ headers.py       │ HeaderFields: ordered, last declaration wins     │
    │ request.py       │ HTTPRequest + RequestParser                      │
    │ response.py      │ Outcome + ResponseEmitter                        │
    │ errors.py        │ HTTPError hierarchy, one class per failure kind  │
    │ status_codes.py  │ HTTPStatus, limited to codes actually emitted    │
    │ mime_types.py    │ Content-Type policies                            │
    └─────────────────────────────────────────────────────────────────────┘

Nothing here touches the filesystem layout or decides what a method
means; that is the dispatcher's and the handlers' job.

=============================================================================
"""

from .errors import (
    HTTPError,
    HTTPParseError,
    MalformedRequestLine,
    MalformedHeaderField,
    TruncatedStream,
    BodyTooLarge,
    IOTransferError,
)
from .headers import HeaderField, HeaderFields, lookup
from .request import HTTPRequest, RequestParser, parse_request
from .response import Outcome, ResponseEmitter, format_http_date
from .status_codes import HTTPStatus
from .mime_types import (
    get_mime_type,
    get_policy,
    guess_content_type,
    content_type_by_extension,
)

__all__ = [
    # Errors
    "HTTPError",
    "HTTPParseError",
    "MalformedRequestLine",
    "MalformedHeaderField",
    "TruncatedStream",
    "BodyTooLarge",
    "IOTransferError",

    # Headers
    "HeaderField",
    "HeaderFields",
    "lookup",

    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "parse_request",

    # Response emission
    "Outcome",
    "ResponseEmitter",
    "format_http_date",

    # Status codes
    "HTTPStatus",

    # Content types
    "get_mime_type",
    "get_policy",
    "guess_content_type",
    "content_type_by_extension",
]
