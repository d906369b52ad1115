"""Tests for the remote log HTTP sink."""

import json
import logging
from unittest.mock import MagicMock

import pytest
import requests

from gateway.errors import LogSinkError
from gateway.remote_log import LogSink, build_log_payload
from tests.helpers import make_reading

_URL = "http://logs.test/ingest"


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.post.return_value = MagicMock(status_code=200)
    return session


@pytest.fixture
def sink(session):
    sink = LogSink(_URL, "secret-token", timeout=1.0, session=session)
    yield sink
    sink.close()


def test_payload_contains_reading_and_dispatch_time():
    body = json.loads(build_log_payload(make_reading(9, 1.5, -2.0), 1234))
    assert body["timestamp"] == 9
    assert body["fused_data"] == {"angle_x_deg": 1.5, "angle_y_deg": -2.0}
    assert body["logged_at"] == 1234


def test_post_sends_multipart_token_and_data(sink, session):
    sink.post('{"a": 1}')

    args, kwargs = session.post.call_args
    assert args == (_URL,)
    assert kwargs["timeout"] == 1.0
    assert kwargs["files"]["token"] == (None, "secret-token")
    assert kwargs["files"]["data"] == (None, '{"a": 1}', "application/json")


def test_post_non_2xx_raises(sink, session):
    session.post.return_value = MagicMock(status_code=401)
    with pytest.raises(LogSinkError, match="401"):
        sink.post("{}")


def test_post_network_error_raises(sink, session):
    session.post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(LogSinkError):
        sink.post("{}")


def test_submit_posts_in_background(sink, session):
    future = sink.submit(make_reading(3), 42)
    assert future.result(timeout=2.0) is True
    payload = session.post.call_args.kwargs["files"]["data"][1]
    assert json.loads(payload)["logged_at"] == 42


def test_submit_failure_is_logged_not_raised(sink, session, caplog):
    session.post.side_effect = requests.Timeout("slow")
    with caplog.at_level(logging.WARNING, logger="gateway.remote_log.sink"):
        future = sink.submit(make_reading(3), 42)
        assert future.result(timeout=2.0) is False
    assert "Dispatch dropped" in caplog.text
    assert session.post.call_count == 1


def test_submit_after_close_is_dropped(session):
    sink = LogSink(_URL, "token", session=session)
    sink.close()
    assert sink.submit(make_reading(), 0) is None
    session.close.assert_called_once()
