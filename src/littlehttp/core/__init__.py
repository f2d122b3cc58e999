"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

Networking plumbing for running littlehttp without inetd.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket (SO_REUSEADDR)                  │
    │  • Runs the accept() loop in the calling thread                     │
    │  • One daemon thread per connection, one request per thread         │
    │  • Graceful shutdown on SIGTERM / SIGINT                            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer

__all__ = ["SocketServer"]
