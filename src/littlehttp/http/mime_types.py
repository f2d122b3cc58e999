"""
=============================================================================
CONTENT-TYPE POLICIES
=============================================================================

Decides the Content-Type header of a served file.

=============================================================================
A POLICY IS JUST A FUNCTION
=============================================================================

    ContentTypePolicy = Callable[[FileInfo], str]

The static handler calls whatever policy it was given with the resolved
FileInfo and puts the result in the 200 response. Two ship here:

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ Policy                       │ Result                               │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ guess_content_type (default) │ always "text/plain"                  │
    │ content_type_by_extension    │ ".html" → "text/html; charset=utf-8" │
    │                              │ ".png"  → "image/png"                │
    │                              │ unknown → "application/octet-stream" │
    └──────────────────────────────┴──────────────────────────────────────┘

The default is a deliberate stub that keeps classic LittleHTTP responses
byte-for-byte stable. Anything with the same signature can be swapped in
without touching the handler or the emitter:

    handler = StaticFileHandler(docroot, content_type=lambda info: "text/css")

=============================================================================
"""

from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from ..handlers.static import FileInfo


ContentTypePolicy = Callable[["FileInfo"], str]


# =============================================================================
# MIME TYPE DATABASE
# =============================================================================
#
# Lowercase extension (with dot) → MIME type. Covers what a small static
# site actually serves.
#
# =============================================================================

MIME_TYPES = {
    # text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",

    # images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",

    # fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # documents and archives
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".tar": "application/x-tar",
    ".wasm": "application/wasm",
}

DEFAULT_MIME_TYPE = "application/octet-stream"

# What the classic server says for every file.
STUB_CONTENT_TYPE = "text/plain"

_TEXT_APPLICATION_TYPES = {
    "application/json",
    "application/xml",
    "image/svg+xml",
}


def get_mime_type(path: str | Path, default: Optional[str] = None) -> str:
    """
    MIME type for a file name, by extension.

    Examples:
        >>> get_mime_type("/srv/www/site.CSS")
        'text/css'
        >>> get_mime_type("notes.xyz")
        'application/octet-stream'
    """
    extension = Path(path).suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def is_text_type(mime_type: str) -> bool:
    """True for text/* and the application types that are really text."""
    return mime_type.startswith("text/") or mime_type in _TEXT_APPLICATION_TYPES


# =============================================================================
# POLICIES
# =============================================================================

def guess_content_type(info: "FileInfo") -> str:
    """Default policy: a fixed placeholder, whatever the file."""
    return STUB_CONTENT_TYPE


def content_type_by_extension(info: "FileInfo", charset: str = "utf-8") -> str:
    """
    Policy backed by MIME_TYPES.

    Text types get a charset parameter:
        index.html  →  "text/html; charset=utf-8"
        logo.png    →  "image/png"
    """
    mime_type = get_mime_type(info.path)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type


POLICIES: dict[str, ContentTypePolicy] = {
    "stub": guess_content_type,
    "extension": content_type_by_extension,
}


def get_policy(name: str) -> ContentTypePolicy:
    """
    Look up a policy by its configuration name ("stub" or "extension").

    Raises:
        ValueError: for an unknown name.
    """
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown content-type policy: {name}") from None
