"""
=============================================================================
SOCKET SUPERVISOR
=============================================================================

An optional stand-in for inetd: listens on a TCP port and runs one
service() call per accepted connection, each on its own thread.

=============================================================================
ONE CONNECTION, ONE TRANSACTION
=============================================================================

    ┌──────────────┐   accept()   ┌──────────────────────────────────────┐
    │ listen socket│ ───────────► │ thread: _serve_connection            │
    │ (main thread)│              │   rfile = sock.makefile("rb")        │
    └──────────────┘              │   wfile = sock.makefile("wb")        │
           ▲                      │   service(rfile, wfile, config)      │
           │  1 s accept timeout  │   close everything                   │
           └── checks _running    └──────────────────────────────────────┘

Every response says "Connection: close", so the thread closes the socket
as soon as service() returns. Threads share nothing but the read-only
config and docroot, which is all the isolation the core needs.

A failing connection (malformed request, client hung up mid-body,
timeout) is logged and dropped. It never reaches the accept loop.

=============================================================================
SHUTDOWN
=============================================================================

SIGINT (Ctrl+C) and SIGTERM (docker stop, systemd) flip _running; the
accept loop notices within a second, restores the original signal
handlers and closes the listening socket, then waits up to
drain_timeout seconds for connections still being served. Threads are
daemons, so one stuck past that deadline cannot keep the process alive.

=============================================================================
"""

import logging
import signal
import socket
import threading
import time
from typing import Optional, Tuple

from ..config import ServerConfig
from ..http.errors import HTTPError
from ..http.mime_types import ContentTypePolicy
from ..server import service


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Thread-per-connection TCP supervisor around service().

    Usage:
        server = SocketServer(ServerConfig(docroot="./public", port=8080))
        server.serve_forever()  # blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(
        self,
        config: ServerConfig,
        content_type: Optional[ContentTypePolicy] = None,
        install_signal_handlers: bool = True,
        drain_timeout: float = 5.0,
    ):
        """
        Args:
            config: Needs docroot and port; port 0 picks a free port.
            content_type: Passed through to service().
            install_signal_handlers: Trap SIGINT/SIGTERM while serving.
                                     Only possible from the main thread.
            drain_timeout: Seconds shutdown waits for in-flight
                           connections before giving up on them.
        """
        self.config = config
        self.content_type = content_type
        self.install_signal_handlers = install_signal_handlers
        self.drain_timeout = drain_timeout

        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready = threading.Event()
        self._original_handlers: dict = {}
        self._connections: set[threading.Thread] = set()
        self._connections_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def bound_address(self) -> Tuple[str, int]:
        """Actual (host, port) once listening; useful with port 0."""
        if self._socket is None:
            return (self.config.host, self.config.port or 0)
        return self._socket.getsockname()[:2]

    @property
    def active_connections(self) -> int:
        """Connections currently being served."""
        with self._connections_lock:
            return len(self._connections)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. Returns False on timeout."""
        return self._ready.wait(timeout)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def serve_forever(self) -> None:
        """Bind, listen and accept until shutdown() is called."""
        self._socket = self._create_socket()
        try:
            self._socket.bind((self.config.host, self.config.port or 0))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._running = True
        if self.install_signal_handlers:
            self._setup_signals()

        host, port = self.bound_address
        logger.info(f"Serving {self.config.docroot} on {host}:{port}")
        self._ready.set()

        try:
            self._accept_loop()
        finally:
            self._cleanup()

    def shutdown(self) -> None:
        """Stop accepting connections. Safe to call more than once."""
        if self._running:
            logger.info("Shutting down...")
        self._running = False

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # restart without waiting out TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        # lets the accept loop poll _running
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self) -> None:
        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}")
            self.shutdown()

        for sig in (signal.SIGINT, signal.SIGTERM):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def _cleanup(self) -> None:
        self._restore_signals()
        if self._socket is not None:
            # no new connections while draining
            self._socket.close()
            self._socket = None
        self._drain_connections()
        self._ready.clear()
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTIONS
    # =========================================================================

    def _accept_loop(self) -> None:
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            client = f"{client_address[0]}:{client_address[1]}"
            logger.debug(f"Accepted connection from {client}")

            thread = threading.Thread(
                target=self._serve_connection,
                args=(client_socket, client),
                name=f"littlehttp-{client}",
                daemon=True,
            )
            with self._connections_lock:
                self._connections.add(thread)
            thread.start()

    def _drain_connections(self) -> None:
        """Wait up to drain_timeout for connections still being served."""
        with self._connections_lock:
            pending = list(self._connections)
        if not pending:
            return

        logger.info(f"Waiting for {len(pending)} connection(s) to finish")
        deadline = time.monotonic() + self.drain_timeout
        for thread in pending:
            thread.join(max(0.0, deadline - time.monotonic()))

        unfinished = sum(1 for t in pending if t.is_alive())
        if unfinished:
            logger.warning(f"Abandoning {unfinished} unfinished connection(s)")

    def _serve_connection(self, client_socket: socket.socket, client: str) -> None:
        """Run one transaction on an accepted socket, then close it."""
        client_socket.settimeout(self.config.timeout)
        try:
            with client_socket, \
                    client_socket.makefile("rb") as rfile, \
                    client_socket.makefile("wb") as wfile:
                service(rfile, wfile, self.config, content_type=self.content_type, client=client)
        except HTTPError:
            # already logged by service(); only this connection is lost
            pass
        except Exception:
            logger.exception(f"[{client}] Unexpected error")
        finally:
            with self._connections_lock:
                self._connections.discard(threading.current_thread())
