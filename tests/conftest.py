"""
pytest configuration and fixtures.
"""

import os
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from littlehttp import ServerConfig
from littlehttp.core.socket_server import SocketServer


INDEX_HTML = b"<html><body><h1>It works</h1></body></html>\n"
HELLO_TXT = b"hello, world\n"


@pytest.fixture
def docroot(tmp_path: Path) -> Path:
    """
    A small document root:

        www/
        ├── index.html
        ├── hello.txt
        ├── empty.txt
        ├── big.bin         (3000 bytes, three emitter blocks)
        ├── subdir/
        │   └── nested.txt
        └── link.txt -> hello.txt

    plus tmp_path/secret.txt next to it, outside the docroot.
    """
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "hello.txt").write_bytes(HELLO_TXT)
    (root / "empty.txt").write_bytes(b"")
    (root / "big.bin").write_bytes(bytes(range(256)) * 11 + b"x" * 184)
    (root / "subdir").mkdir()
    (root / "subdir" / "nested.txt").write_bytes(b"nested\n")
    os.symlink(root / "hello.txt", root / "link.txt")

    (tmp_path / "secret.txt").write_bytes(b"top secret\n")
    return root


@pytest.fixture
def config(docroot: Path) -> ServerConfig:
    """Default test configuration serving the docroot fixture."""
    return ServerConfig(docroot=str(docroot), log_level="WARNING")


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP/1.0 GET request."""
    return (
        b"GET /hello.txt HTTP/1.0\r\n"
        b"Host: localhost\r\n"
        b"User-Agent: pytest\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP/1.1 POST request with a form body."""
    body = b"name=John&email=john%40example.com"
    head = (
        b"POST /form HTTP/1.1\r\n"
        b"Host: localhost\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n"
    )
    return head + f"Content-Length: {len(body)}\r\n\r\n".encode() + body


def _split_response(raw: bytes) -> tuple[str, dict[str, str], bytes]:
    """
    Split a raw response into (status line, headers, body).

    Header names are lowercased for lookup.
    """
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name.lower()] = value
    return lines[0], headers, body


@pytest.fixture
def split_response():
    """The response splitter, for tests that read raw responses."""
    return _split_response


class TestServer:
    """SocketServer running in a background thread."""

    __test__ = False

    def __init__(self, server: SocketServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.bound_address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.serve_forever,
            daemon=True
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(docroot: Path) -> Generator[TestServer, None, None]:
    """A listening server on an OS-assigned port."""
    server = SocketServer(
        ServerConfig(
            docroot=str(docroot),
            host="127.0.0.1",
            port=0,
            timeout=5.0,
            log_level="WARNING",
        ),
        install_signal_handlers=False,
    )

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
