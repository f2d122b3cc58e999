"""
=============================================================================
LITTLEHTTP CLI ENTRY POINT
=============================================================================

Command-line interface for serving a document root.

=============================================================================
USAGE
=============================================================================

    # One request on stdin, response on stdout (inetd / xinetd / systemd)
    python -m littlehttp /srv/www

    # Try it by hand
    printf 'GET /index.html HTTP/1.0\\r\\n\\r\\n' | python -m littlehttp ./public

    # Listen on a port instead, one thread per connection
    python -m littlehttp ./public --port 8080

    # Real content types, refuse paths that escape the docroot
    python -m littlehttp ./public --port 8080 --mime extension --confine

    # Machine-readable access log on stderr
    python -m littlehttp ./public --log-format json

=============================================================================
INETD
=============================================================================

    # /etc/inetd.conf
    http  stream  tcp  nowait  www-data  /usr/bin/littlehttp  littlehttp /srv/www

inetd accepts the connection and hands it to us as stdin/stdout. That
is why nothing but the HTTP response may ever be written to stdout: all
logging goes to stderr.

=============================================================================
EXIT STATUS
=============================================================================

    0   a response was sent (any of 200/404/405/501)
    1   bad docroot, bad configuration, unreadable request, or the
        response could not be completed
    2   usage error (argparse)

=============================================================================
"""

import argparse
import os
import sys
from typing import Optional, Sequence

from . import __version__
from .config import CONTENT_TYPE_POLICIES, LOG_FORMATS, ServerConfig
from .core.socket_server import SocketServer
from .http.errors import HTTPError
from .log import setup_logging
from .server import service


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="littlehttp",
        description="Serve one HTTP request from a document root",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  littlehttp /srv/www                           # stdin -> stdout, one request
  littlehttp ./public --port 8080               # listen on a port
  littlehttp ./public --mime extension          # real Content-Types
  littlehttp ./public --confine                 # refuse paths outside docroot
        """
    )

    parser.add_argument(
        "docroot",
        nargs="?",
        help="Directory to serve files from (default: $LITTLEHTTP_DOCROOT)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LISTENING MODE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to with --port (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Listen on this port instead of serving stdin/stdout"
    )

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOUR
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--mime",
        choices=CONTENT_TYPE_POLICIES,
        default=None,
        help="Content-Type policy (default: stub, everything is text/plain)"
    )

    parser.add_argument(
        "--confine",
        action="store_true",
        default=None,
        help="Answer 404 for paths that resolve outside the docroot"
    )

    parser.add_argument(
        "--max-body",
        type=int,
        default=None,
        metavar="BYTES",
        help="Largest accepted Content-Length (default: 1048576)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"LittleHTTP {__version__}"
    )

    return parser


def check_docroot(docroot: str) -> Optional[str]:
    """Return an error message if `docroot` is not a usable directory."""
    if not os.path.exists(docroot):
        return f"document root {docroot} does not exist"
    if not os.path.isdir(docroot):
        return f"document root {docroot} is not a directory"
    return None


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Environment defaults, overridden by whatever was given on the command line."""
    config = ServerConfig.from_env()

    if args.docroot is not None:
        config.docroot = args.docroot
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.mime is not None:
        config.content_types = args.mime
    if args.confine:
        config.confine_to_docroot = True
    if args.max_body is not None:
        config.max_body_length = args.max_body
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point. Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if config.docroot is None:
        parser.error("the docroot argument is required")

    problem = check_docroot(config.docroot)
    if problem:
        print(f"Error: {problem}", file=sys.stderr)
        return 1

    setup_logging(config.log_level)

    # =========================================================================
    # LISTENING MODE
    # =========================================================================

    if config.port is not None:
        try:
            SocketServer(config).serve_forever()
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    # =========================================================================
    # ONE-SHOT MODE
    # =========================================================================
    # stdin/stdout belong to the client; errors were logged by service()

    try:
        service(sys.stdin.buffer, sys.stdout.buffer, config)
    except HTTPError:
        return 1
    return 0


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    sys.exit(main())
