"""
Unit tests for access logging.
"""

import json
import logging

from littlehttp.log import AccessLog, log_access


def make_entry(**overrides) -> AccessLog:
    fields = dict(
        client="127.0.0.1:5000",
        method="GET",
        path="/index.html",
        protocol="HTTP/1.0",
        status=200,
        outcome="SERVE_FILE",
        bytes_sent=1362,
        duration_ms=0.8412,
        timestamp="19/Oct/2026:09:30:00 +0000",
    )
    fields.update(overrides)
    return AccessLog(**fields)


class TestAccessLog:
    """Tests for AccessLog formatting."""

    def test_to_text(self):
        assert make_entry().to_text() == (
            '127.0.0.1:5000 - - [19/Oct/2026:09:30:00 +0000] '
            '"GET /index.html HTTP/1.0" 200 1362 0.84ms'
        )

    def test_to_dict_rounds_duration(self):
        data = make_entry().to_dict()

        assert data["duration_ms"] == 0.84
        assert data["outcome"] == "SERVE_FILE"

    def test_log_access_text(self, caplog):
        with caplog.at_level(logging.INFO, logger="littlehttp.access"):
            log_access(make_entry(status=404, outcome="NOT_FOUND"))

        assert len(caplog.records) == 1
        assert caplog.records[0].name == "littlehttp.access"
        assert '"GET /index.html HTTP/1.0" 404' in caplog.records[0].getMessage()

    def test_log_access_json(self, caplog):
        with caplog.at_level(logging.INFO, logger="littlehttp.access"):
            log_access(make_entry(), log_format="json")

        data = json.loads(caplog.records[0].getMessage())
        assert data["client"] == "127.0.0.1:5000"
        assert data["status"] == 200
        assert data["bytes_sent"] == 1362
