"""
=============================================================================
LITTLEHTTP - A One-Shot HTTP/1.x Static File Server
=============================================================================

LittleHTTP reads exactly one HTTP request from a byte stream, answers it
from a document root, and stops. It is meant to sit behind a supervisor
that owns the socket (inetd, xinetd, systemd socket activation), or
behind its own small thread-per-connection listener.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    LITTLEHTTP ARCHITECTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   instream                                                          │
    │      │                                                               │
    │      ▼                                                               │
    │   RequestParser ──► HTTPRequest (method, path, 1.N, headers, body)  │
    │      │                                                               │
    │      ▼                                                               │
    │   Dispatcher ── GET/HEAD ──► StaticFileHandler ──► resolve()        │
    │      │          POST ──────► 405                                     │
    │      │          other ─────► 501                                     │
    │      ▼                                                               │
    │   ResponseEmitter ──► outstream                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    littlehttp/
    ├── __init__.py          # This file
    ├── __main__.py          # CLI: python -m littlehttp DOCROOT
    ├── config.py            # ServerConfig
    ├── log.py               # Logging setup, access log
    ├── server.py            # service(): one transaction
    ├── dispatcher.py        # Method -> Outcome state machine
    ├── http/                # Wire format
    │   ├── headers.py
    │   ├── request.py
    │   ├── response.py
    │   ├── errors.py
    │   ├── status_codes.py
    │   └── mime_types.py
    ├── handlers/
    │   └── static.py        # Docroot lookup
    └── core/
        └── socket_server.py # Optional TCP listener

=============================================================================
QUICK START
=============================================================================

    import io
    from littlehttp import ServerConfig, service

    request = io.BytesIO(b"GET /index.html HTTP/1.0\\r\\n\\r\\n")
    response = io.BytesIO()
    service(request, response, ServerConfig(docroot="./public"))

    # or from a shell, one request per invocation:
    #   printf 'GET / HTTP/1.0\\r\\n\\r\\n' | python -m littlehttp ./public

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .dispatcher import Dispatcher, Method
from .http.errors import HTTPError, HTTPParseError, IOTransferError
from .http.response import Outcome
from .server import service

__all__ = [
    "ServerConfig",
    "Dispatcher",
    "Method",
    "HTTPError",
    "HTTPParseError",
    "IOTransferError",
    "Outcome",
    "service",
    "__version__",
]
