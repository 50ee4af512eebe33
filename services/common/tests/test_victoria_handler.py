"""
VictoriaLogs shipping tests: direct handler and queue wiring.
"""

import json
import logging
import logging.handlers
import urllib.error
import urllib.parse
from io import StringIO
from unittest.mock import patch

import pytest

from services.common.core import logging_config
from services.common.core.logging_config import CustomJsonFormatter, VictoriaLogsHandler


@pytest.fixture
def log_record():
    record = logging.LogRecord(
        name="graphql_http.handler",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Execution complete",
        args=(),
        exc_info=None,
    )
    record.created = 1678886400.0  # 2023-03-15T13:20:00Z
    return record


@pytest.fixture
def handler():
    handler = VictoriaLogsHandler(
        url="http://localhost:9428/insert/jsonline",
        stream_fields={"container_name": "graphql-gateway", "job": "services"},
        timeout=0.1,
    )
    handler.setFormatter(CustomJsonFormatter())
    return handler


def test_emit_posts_json_line_with_stream_fields(handler, log_record):
    with patch("urllib.request.urlopen") as mock_urlopen:
        handler.emit(log_record)

    req = mock_urlopen.call_args.args[0]
    query = urllib.parse.parse_qs(urllib.parse.urlsplit(req.full_url).query)
    assert query["_stream_fields"] == ["container_name,job"]
    assert query["container_name"] == ["graphql-gateway"]
    assert req.get_method() == "POST"

    data = json.loads(req.data.decode("utf-8"))
    assert data["message"] == "Execution complete"
    assert data["_time"] == "2023-03-15T13:20:00.000+00:00"
    assert data["container_name"] == "graphql-gateway"
    assert data["job"] == "services"


def test_emit_without_formatter_wraps_plain_message(log_record):
    handler = VictoriaLogsHandler(url="http://localhost:9428/insert/jsonline")

    with patch("urllib.request.urlopen") as mock_urlopen:
        handler.emit(log_record)

    data = json.loads(mock_urlopen.call_args.args[0].data.decode("utf-8"))
    assert data == {"message": "Execution complete", "level": "INFO"}


def test_emit_falls_back_to_stderr(handler, log_record):
    mock_stderr = StringIO()

    with (
        patch("urllib.request.urlopen", side_effect=urllib.error.URLError("Connection refused")),
        patch("sys.__stderr__", mock_stderr),
    ):
        handler.emit(log_record)

    fallback_log = json.loads(mock_stderr.getvalue())
    assert fallback_log["fallback"] == "victorialogs_failed"
    assert "Connection refused" in fallback_log["error"]
    assert fallback_log["original_log"]["message"] == "Execution complete"


def test_configure_queue_logging_without_url_is_noop():
    root = logging.getLogger()
    before = list(root.handlers)

    logging_config.configure_queue_logging("graphql-gateway", vl_url="")

    assert root.handlers == before


def test_configure_queue_logging_attaches_queue_handler(monkeypatch):
    started = []
    monkeypatch.setattr(logging.handlers.QueueListener, "start", lambda self: started.append(self))
    monkeypatch.setattr(logging_config.atexit, "register", lambda fn: None)
    root = logging.getLogger()
    before = list(root.handlers)

    try:
        logging_config.configure_queue_logging("graphql-gateway", vl_url="http://vl:9428/insert/jsonline")

        added = [h for h in root.handlers if h not in before]
        assert len(added) == 1
        assert isinstance(added[0], logging.handlers.QueueHandler)
        (target,) = started[0].handlers
        assert isinstance(target, VictoriaLogsHandler)
        assert target.stream_fields["container_name"] == "graphql-gateway"
    finally:
        for h in root.handlers[:]:
            if h not in before:
                root.removeHandler(h)
