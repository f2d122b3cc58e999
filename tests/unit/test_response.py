"""
Unit tests for HTTP response emission.
"""

import errno
import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from littlehttp.handlers.static import FileInfo
from littlehttp.http.errors import IOTransferError
from littlehttp.http import response
from littlehttp.http.request import HTTPRequest
from littlehttp.http.response import (
    NOT_FOUND_PAGE,
    Outcome,
    ResponseEmitter,
    format_http_date,
)
from littlehttp.http.status_codes import HTTPStatus


FIXED_NOW = datetime(2026, 10, 19, 9, 30, 0, tzinfo=timezone.utc)


def make_emitter(out=None, **kwargs) -> ResponseEmitter:
    return ResponseEmitter(out if out is not None else io.BytesIO(), clock=lambda: FIXED_NOW, **kwargs)


def file_info(path: Path) -> FileInfo:
    return FileInfo(path=str(path), size=path.stat().st_size, exists=True)


class BrokenPipeStream(io.BytesIO):
    """Accepts `budget` bytes, then fails like a closed socket."""

    def __init__(self, budget: int):
        super().__init__()
        self.budget = budget

    def write(self, data):
        if self.tell() + len(data) > self.budget:
            raise BrokenPipeError(32, "Broken pipe")
        return super().write(data)


class TestServeFile:
    """200 responses."""

    def test_get_headers_and_body(self, docroot: Path, split_response):
        out = io.BytesIO()
        emitter = make_emitter(out)
        request = HTTPRequest(method="GET", path="/hello.txt")

        outcome = emitter.serve_file(request, file_info(docroot / "hello.txt"), "text/plain")

        status_line, headers, body = split_response(out.getvalue())
        assert outcome is Outcome.SERVE_FILE
        assert status_line == "HTTP/1.0 200 OK"
        assert headers["date"] == "Mon, 19 Oct 2026 09:30:00 GMT"
        assert headers["server"] == "LittleHTTP/1.0"
        assert headers["connection"] == "close"
        assert headers["content-length"] == "13"
        assert headers["content-type"] == "text/plain"
        assert body == b"hello, world\n"

    def test_header_order(self, docroot: Path):
        out = io.BytesIO()
        request = HTTPRequest(method="GET", path="/hello.txt")

        make_emitter(out).serve_file(request, file_info(docroot / "hello.txt"), "text/plain")

        head = out.getvalue().split(b"\r\n\r\n")[0].split(b"\r\n")
        names = [line.split(b":")[0] for line in head[1:]]
        assert names == [b"Date", b"Server", b"Connection", b"Content-Length", b"Content-Type"]

    def test_minor_version_echoed(self, docroot: Path):
        out = io.BytesIO()
        request = HTTPRequest(method="GET", path="/hello.txt", protocol_minor_version=1)

        make_emitter(out).serve_file(request, file_info(docroot / "hello.txt"), "text/plain")

        assert out.getvalue().startswith(b"HTTP/1.1 200 OK\r\n")

    def test_multi_block_file(self, docroot: Path):
        out = io.BytesIO()
        request = HTTPRequest(method="GET", path="/big.bin")

        make_emitter(out, block_size=1024).serve_file(
            request, file_info(docroot / "big.bin"), "application/octet-stream"
        )

        body = out.getvalue().split(b"\r\n\r\n", 1)[1]
        assert body == (docroot / "big.bin").read_bytes()
        assert len(body) == 3000

    def test_empty_file(self, docroot: Path, split_response):
        out = io.BytesIO()
        request = HTTPRequest(method="GET", path="/empty.txt")

        make_emitter(out).serve_file(request, file_info(docroot / "empty.txt"), "text/plain")

        _, headers, body = split_response(out.getvalue())
        assert headers["content-length"] == "0"
        assert body == b""

    def test_head_has_no_body(self, docroot: Path, split_response):
        get_out, head_out = io.BytesIO(), io.BytesIO()
        info = file_info(docroot / "hello.txt")

        make_emitter(get_out).serve_file(HTTPRequest(method="GET", path="/hello.txt"), info, "text/plain")
        make_emitter(head_out).serve_file(HTTPRequest(method="HEAD", path="/hello.txt"), info, "text/plain")

        get_head, _, _ = get_out.getvalue().partition(b"\r\n\r\n")
        assert head_out.getvalue() == get_head + b"\r\n\r\n"
        assert split_response(head_out.getvalue())[1]["content-length"] == "13"

    def test_bytes_sent_and_status(self, docroot: Path):
        out = io.BytesIO()
        emitter = make_emitter(out)

        emitter.serve_file(HTTPRequest(method="GET", path="/x"), file_info(docroot / "hello.txt"), "text/plain")

        assert emitter.status == HTTPStatus.OK
        assert emitter.bytes_sent == len(out.getvalue())

    def test_unopenable_file_writes_nothing(self, tmp_path: Path):
        out = io.BytesIO()
        info = FileInfo(path=str(tmp_path / "vanished.txt"), size=10, exists=True)

        with pytest.raises(IOTransferError) as exc_info:
            make_emitter(out).serve_file(HTTPRequest(method="GET", path="/"), info, "text/plain")

        assert out.getvalue() == b""
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_failure_is_transfer_error(self, docroot: Path):
        out = BrokenPipeStream(budget=150)
        emitter = make_emitter(out)

        with pytest.raises(IOTransferError) as exc_info:
            emitter.serve_file(HTTPRequest(method="GET", path="/"), file_info(docroot / "big.bin"), "text/plain")

        assert isinstance(exc_info.value.__cause__, BrokenPipeError)
        assert exc_info.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert emitter.bytes_sent == len(out.getvalue())

    def test_read_failure_mid_copy(self, docroot: Path, monkeypatch):
        class FailingFile(io.BytesIO):
            """Hands out one block, then fails like a disk error."""

            def read(self, size=-1):
                if self.tell() > 0:
                    raise OSError(errno.EIO, "Input/output error")
                return super().read(size)

        monkeypatch.setattr(response, "open", lambda path, mode: FailingFile(b"x" * 3000), raising=False)
        out = io.BytesIO()
        emitter = make_emitter(out, block_size=1024)

        with pytest.raises(IOTransferError) as exc_info:
            emitter.serve_file(HTTPRequest(method="GET", path="/"), file_info(docroot / "big.bin"), "text/plain")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.__cause__.errno == errno.EIO
        # head plus the one block that was read
        assert out.getvalue().endswith(b"\r\n\r\n" + b"x" * 1024)


class TestNotices:
    """404, 405 and 501 responses."""

    def test_not_found_exact_bytes(self):
        out = io.BytesIO()

        outcome = make_emitter(out).not_found(HTTPRequest(method="GET", path="/missing"))

        assert outcome is Outcome.NOT_FOUND
        assert out.getvalue() == (
            b"HTTP/1.0 404 Not Found\r\n"
            b"Date: Mon, 19 Oct 2026 09:30:00 GMT\r\n"
            b"Server: LittleHTTP/1.0\r\n"
            b"Connection: close\r\n"
            b"Content-Type: text/html\r\n"
            b"\r\n"
        ) + NOT_FOUND_PAGE.encode()

    def test_notices_have_no_content_length(self, split_response):
        out = io.BytesIO()

        make_emitter(out).not_found(HTTPRequest(method="GET", path="/missing"))

        assert "content-length" not in split_response(out.getvalue())[1]

    def test_method_not_allowed_names_method(self, split_response):
        out = io.BytesIO()

        outcome = make_emitter(out).method_not_allowed(HTTPRequest(method="POST", path="/"))

        status_line, headers, body = split_response(out.getvalue())
        assert outcome is Outcome.METHOD_NOT_ALLOWED
        assert status_line == "HTTP/1.0 405 Method Not Allowed"
        assert headers["content-type"] == "text/html"
        assert b"The request method POST is not allowed" in body

    def test_not_implemented_names_method(self, split_response):
        out = io.BytesIO()

        outcome = make_emitter(out).not_implemented(HTTPRequest(method="PATCH", path="/", protocol_minor_version=1))

        status_line, _, body = split_response(out.getvalue())
        assert outcome is Outcome.NOT_IMPLEMENTED
        assert status_line == "HTTP/1.1 501 Not Implemented"
        assert b"The request method PATCH is not implemented" in body

    def test_method_is_html_escaped(self):
        out = io.BytesIO()

        make_emitter(out).not_implemented(HTTPRequest(method="<SCRIPT>", path="/"))

        assert b"&lt;SCRIPT&gt;" in out.getvalue()
        assert b"<SCRIPT>" not in out.getvalue()

    def test_head_not_found_has_no_body(self):
        out = io.BytesIO()

        make_emitter(out).not_found(HTTPRequest(method="HEAD", path="/missing"))

        assert out.getvalue().endswith(b"Content-Type: text/html\r\n\r\n")

    def test_custom_server_header(self, split_response):
        out = io.BytesIO()

        make_emitter(out, server_header="Custom/2.0").not_found(HTTPRequest(method="GET", path="/"))

        assert split_response(out.getvalue())[1]["server"] == "Custom/2.0"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_phrases(self):
        """Test that all statuses have phrases."""
        for status in HTTPStatus:
            assert status.phrase

        assert HTTPStatus.OK.phrase == "OK"
        assert HTTPStatus.NOT_FOUND.phrase == "Not Found"
        assert HTTPStatus.PAYLOAD_TOO_LARGE.phrase == "Payload Too Large"

    def test_status_line(self):
        assert HTTPStatus.METHOD_NOT_ALLOWED.status_line == "405 Method Not Allowed"

    def test_is_error(self):
        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.NOT_IMPLEMENTED.is_error
        assert not HTTPStatus.OK.is_error


class TestFormatHTTPDate:
    """Tests for HTTP date formatting."""

    def test_format(self):
        """Test HTTP date format."""
        dt = datetime(2026, 1, 15, 12, 30, 45, tzinfo=timezone.utc)

        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"

    def test_converts_to_utc(self):
        dt = datetime(2026, 1, 15, 14, 30, 45, tzinfo=timezone(timedelta(hours=2)))

        assert format_http_date(dt) == "Thu, 15 Jan 2026 12:30:45 GMT"
