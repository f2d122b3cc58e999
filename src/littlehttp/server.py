"""
=============================================================================
ONE TRANSACTION
=============================================================================

service() is the whole server as far as a single connection is
concerned: one request in, one response out.

    instream ──► RequestParser ──► Dispatcher ──► ResponseEmitter ──► outstream
                                       │
                                       └──► StaticFileHandler / resolve()

It is transport-agnostic. The CLI calls it with stdin/stdout, the socket
supervisor with socket.makefile() pairs, the tests with io.BytesIO.

=============================================================================
ERRORS
=============================================================================

Parse errors and transfer errors are logged with their kind and then
re-raised untouched. service() never writes an error response of its
own and never swallows anything; the caller decides whether a failure
ends the process (one-shot mode) or just the connection (listening mode).

=============================================================================
"""

import logging
import time
from typing import BinaryIO, Optional

from .config import ServerConfig
from .dispatcher import Dispatcher
from .http.errors import HTTPParseError, IOTransferError
from .http.mime_types import ContentTypePolicy, get_policy
from .http.request import RequestParser
from .http.response import Outcome, ResponseEmitter
from .log import AccessLog, access_timestamp, log_access


logger = logging.getLogger(__name__)


def service(
    instream: BinaryIO,
    outstream: BinaryIO,
    config: ServerConfig,
    content_type: Optional[ContentTypePolicy] = None,
    client: str = "-",
) -> Outcome:
    """
    Serve exactly one request.

    Args:
        instream: Readable binary stream holding the request.
        outstream: Writable binary stream for the response; flushed, not
                   closed.
        config: Server configuration; config.docroot must be set.
        content_type: Overrides the policy named by config.content_types.
        client: Peer description for log lines ("ip:port" or "-").

    Returns:
        The Outcome that was emitted.

    Raises:
        HTTPParseError: the request was unreadable; nothing was written.
        IOTransferError: the response could not be completed.
    """
    if config.docroot is None:
        raise ValueError("ServerConfig.docroot is not set")

    started = time.perf_counter()

    parser = RequestParser(
        max_body_length=config.max_body_length,
        max_line_length=config.max_line_length,
    )
    try:
        request = parser.parse(instream)
    except HTTPParseError as e:
        logger.warning(f"[{client}] {e.kind}: {e}")
        raise

    emitter = ResponseEmitter(
        outstream,
        server_header=config.server_header,
        block_size=config.block_size,
    )
    dispatcher = Dispatcher.for_docroot(
        config.docroot,
        content_type=content_type or get_policy(config.content_types),
        confine=config.confine_to_docroot,
    )
    try:
        outcome = dispatcher.dispatch(request, emitter)
    except IOTransferError as e:
        logger.error(f"[{client}] {e.kind} after {emitter.bytes_sent} bytes: {e}")
        raise

    log_access(
        AccessLog(
            client=client,
            method=request.method,
            path=request.path,
            protocol=request.version,
            status=int(outcome.status),
            outcome=outcome.name,
            bytes_sent=emitter.bytes_sent,
            duration_ms=(time.perf_counter() - started) * 1000,
            timestamp=access_timestamp(),
        ),
        config.log_format,
    )
    return outcome
