"""
Chat webhook alerts.

Posts one attachment message to an incoming-webhook URL:
    {"username": ..., "attachments": [{"title": ..., "color": ..., "text": ...}]}

Usage:
    send_alert(webhook_url, "billing-bot", "Job failed", COLOR_DANGER, str(err))
"""

from __future__ import annotations

from typing import Any

import requests

from crosslog.exceptions import AlertError

COLOR_GOOD = "good"
COLOR_DANGER = "danger"
COLOR_WARNING = "warning"


def build_payload(username: str, title: str, color: str, text: str) -> dict[str, Any]:
    """Attachment payload. Empty color falls back to COLOR_GOOD."""
    return {
        "username": username,
        "attachments": [
            {
                "title": title,
                "color": color or COLOR_GOOD,
                "text": text,
            }
        ],
    }


def send_alert(
    channel: str,
    username: str,
    title: str,
    color: str,
    text: str,
    *,
    timeout: float = 10.0,
) -> None:
    """
    Send a notification to a webhook channel.

    Raises AlertError for an empty channel, a non-200 response,
    or any transport failure.
    """
    if not channel:
        raise AlertError("invalid channel")

    try:
        response = requests.post(
            channel,
            json=build_payload(username, title, color, text),
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise AlertError(f"error sending message to webhook: {e}") from e

    try:
        if response.status_code != requests.codes.ok:
            raise AlertError(
                f"webhook returned status {response.status_code} {response.reason}"
            )
    finally:
        response.close()
