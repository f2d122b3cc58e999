"""
=============================================================================
LOGGING
=============================================================================

Logging setup and the one-line-per-transaction access log.

=============================================================================
WHERE LOGS GO
=============================================================================

In one-shot mode stdout IS the HTTP response, so every log line must go
to stderr. logging.basicConfig() writes to stderr by default, which is
exactly what an inetd-style service needs: the supervisor captures
stderr, the client only ever sees the response.

    logger name              what
    ───────────              ────
    littlehttp.*             diagnostics (parse failures, traversal attempts)
    littlehttp.access        one line per completed transaction

=============================================================================
ACCESS LOG FORMATS
=============================================================================

    text (Apache-like):
        127.0.0.1 - - [19/Oct/2026:09:30:00 +0000] "GET /index.html HTTP/1.0" 200 1362 0.84ms

    json (for log aggregators):
        {"client": "127.0.0.1", "method": "GET", "path": "/index.html",
         "protocol": "HTTP/1.0", "status": 200, "outcome": "SERVE_FILE",
         "bytes_sent": 1362, "duration_ms": 0.84, "timestamp": "..."}

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass


access_logger = logging.getLogger("littlehttp.access")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class AccessLog:
    """
    Structured record of one transaction.

    client is "-" when the peer is unknown (stdin/stdout mode).
    """

    client: str
    method: str
    path: str
    protocol: str
    status: int
    outcome: str
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        return (
            f'{self.client} - - [{self.timestamp}] '
            f'"{self.method} {self.path} {self.protocol}" {self.status} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


def access_timestamp() -> str:
    """Current time in access log form, e.g. 19/Oct/2026:09:30:00 +0000."""
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")


def log_access(entry: AccessLog, log_format: str = "text") -> None:
    """Emit `entry` on the access logger in the chosen format."""
    if log_format == "json":
        access_logger.info(json.dumps(entry.to_dict()))
    else:
        access_logger.info(entry.to_text())


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger for stderr output.

    Args:
        level: Level name ("DEBUG", "INFO", ...); unknown names fall back
               to INFO.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )

    logging.getLogger("littlehttp").setLevel(numeric_level)
