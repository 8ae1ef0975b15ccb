"""
Tests for webhook alerts. HTTP is mocked; nothing leaves the process.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from crosslog.alerts import (
    COLOR_DANGER,
    COLOR_GOOD,
    build_payload,
    send_alert,
)
from crosslog.exceptions import AlertError, CrosslogError

CHANNEL = "https://hooks.example.com/services/T000/B000"


def _response(status=200, reason="OK"):
    response = MagicMock()
    response.status_code = status
    response.reason = reason
    return response


class TestPayload:
    def test_structure(self):
        payload = build_payload("bot", "Title", COLOR_DANGER, "body")
        assert payload == {
            "username": "bot",
            "attachments": [{"title": "Title", "color": "danger", "text": "body"}],
        }

    def test_empty_color_defaults_to_good(self):
        payload = build_payload("bot", "Title", "", "body")
        assert payload["attachments"][0]["color"] == COLOR_GOOD

    def test_quotes_survive(self):
        payload = build_payload("bot", 'say "hi"', "", 'a "quoted" text')
        assert payload["attachments"][0]["text"] == 'a "quoted" text'


class TestSendAlert:
    def test_posts_json(self):
        response = _response()
        with patch("crosslog.alerts.requests.post", return_value=response) as post:
            send_alert(CHANNEL, "bot", "Job failed", COLOR_DANGER, "stack trace", timeout=2)
        post.assert_called_once_with(
            CHANNEL,
            json=build_payload("bot", "Job failed", COLOR_DANGER, "stack trace"),
            timeout=2,
        )
        response.close.assert_called_once()

    def test_empty_channel(self):
        with patch("crosslog.alerts.requests.post") as post:
            with pytest.raises(AlertError, match="invalid channel"):
                send_alert("", "bot", "t", "", "x")
        post.assert_not_called()

    def test_non_ok_status(self):
        response = _response(status=500, reason="Internal Server Error")
        with patch("crosslog.alerts.requests.post", return_value=response):
            with pytest.raises(AlertError, match="500"):
                send_alert(CHANNEL, "bot", "t", "", "x")
        response.close.assert_called_once()

    def test_transport_failure_chained(self):
        boom = requests.exceptions.ConnectionError("refused")
        with patch("crosslog.alerts.requests.post", side_effect=boom):
            with pytest.raises(AlertError) as info:
                send_alert(CHANNEL, "bot", "t", "", "x")
        assert info.value.__cause__ is boom
        assert isinstance(info.value, CrosslogError)
