"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every tunable of LittleHTTP in one dataclass.

=============================================================================
WHERE VALUES COME FROM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m littlehttp ./public --mime extension            │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── LITTLEHTTP_MIME=extension python -m littlehttp ./public   │
    │                                                                      │
    │   3. Defaults (in this dataclass)                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The defaults reproduce the classic LittleHTTP/1.0 behavior: 1 MiB body
ceiling, 4 KiB line buffer, 1 KiB copy blocks, a text/plain content-type
stub and no path containment.

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional


CONTENT_TYPE_POLICIES = ("stub", "extension")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for one LittleHTTP process.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    DOCUMENT ROOT
    - docroot, confine_to_docroot, content_types

    PROTOCOL LIMITS
    - max_body_length, max_line_length, block_size

    SERVER IDENTITY
    - server_name, server_version

    LISTENING MODE (only with a port)
    - host, port, backlog, timeout

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENT ROOT
    # ─────────────────────────────────────────────────────────────────────

    docroot: Optional[str] = None
    """
    Directory the URL path is appended to. Validated by the CLI, trusted
    by everything below it.
    """

    confine_to_docroot: bool = False
    """
    Canonicalize resolved paths and refuse (404) anything that ends up
    outside the docroot. Off by default: "/../etc/passwd" is then looked
    up verbatim, as LittleHTTP always has.
    """

    content_types: str = "stub"
    """
    Content-Type policy for served files:
    - "stub"      - every file is text/plain
    - "extension" - looked up from the file extension
    """

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_body_length: int = 1024 * 1024  # 1 MiB
    """
    Largest Content-Length accepted. Anything above is BodyTooLarge and
    the body is never read.
    """

    max_line_length: int = 4096
    """Longest request or header line, terminator included."""

    block_size: int = 1024
    """Chunk size used when copying a file to the output stream."""

    # ─────────────────────────────────────────────────────────────────────
    # SERVER IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    server_name: str = "LittleHTTP"
    server_version: str = "1.0"

    # ─────────────────────────────────────────────────────────────────────
    # LISTENING MODE
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"

    port: Optional[int] = None
    """
    None  - serve exactly one request from stdin to stdout (inetd style)
    0     - listen on an OS-assigned port (tests)
    1-65535 - listen on that port
    """

    backlog: int = 128

    timeout: Optional[float] = 30.0
    """Per-connection socket timeout in listening mode. None = block."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"

    log_format: str = "text"
    """Access log format: 'text' (Apache style) or 'json'."""

    @property
    def server_header(self) -> str:
        """Value of the Server header, e.g. "LittleHTTP/1.0"."""
        return f"{self.server_name}/{self.server_version}"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        LITTLEHTTP_DOCROOT     Document root (default: None)
        LITTLEHTTP_HOST        Listen host (default: 127.0.0.1)
        LITTLEHTTP_PORT        Listen port (default: unset = stdin/stdout)
        LITTLEHTTP_TIMEOUT     Socket timeout in seconds (default: 30)
        LITTLEHTTP_MAX_BODY    Body ceiling in bytes (default: 1048576)
        LITTLEHTTP_MIME        stub | extension (default: stub)
        LITTLEHTTP_CONFINE     1/true/yes to enable containment
        LITTLEHTTP_LOG_LEVEL   Logging level (default: INFO)
        LITTLEHTTP_LOG_FORMAT  text | json (default: text)

        =====================================================================
        """
        port = os.getenv("LITTLEHTTP_PORT")
        return cls(
            docroot=os.getenv("LITTLEHTTP_DOCROOT"),
            host=os.getenv("LITTLEHTTP_HOST", "127.0.0.1"),
            port=int(port) if port else None,
            timeout=float(os.getenv("LITTLEHTTP_TIMEOUT", "30")),
            max_body_length=int(os.getenv("LITTLEHTTP_MAX_BODY", str(1024 * 1024))),
            content_types=os.getenv("LITTLEHTTP_MIME", "stub"),
            confine_to_docroot=os.getenv("LITTLEHTTP_CONFINE", "").lower() in ("1", "true", "yes"),
            log_level=os.getenv("LITTLEHTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("LITTLEHTTP_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Validate configuration values at startup, not at first use.

        Raises:
            ValueError: naming the first offending setting.
        """
        if self.port is not None and not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.max_body_length < 0:
            raise ValueError("max_body_length must be >= 0")

        if self.max_line_length < 16:
            raise ValueError("max_line_length must be >= 16")

        if self.block_size < 1:
            raise ValueError("block_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.content_types not in CONTENT_TYPE_POLICIES:
            raise ValueError(
                f"content_types must be one of {', '.join(CONTENT_TYPE_POLICIES)}"
            )

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
