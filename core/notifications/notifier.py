"""
Operator Notifications

Minimal alert channel used for lifecycle events (startup alert).
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from core.config.runtime import NotificationsConfig
from core.http import HttpClient


logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Sends a plain-text alert to operators."""

    def send(self, text: str) -> None:
        ...


class LogNotifier:
    """Writes alerts to the log."""

    def send(self, text: str) -> None:
        logger.info(f"[notify] {text}")


class WebhookNotifier:
    """
    POSTs alerts as JSON ({"text": ...}) to a webhook URL.

    Raises HttpError when the webhook is unreachable or answers non-2xx.
    """

    def __init__(self, url: str, *, timeout: float = 10.0, client: HttpClient | None = None) -> None:
        self.url = url
        self.client = client or HttpClient(timeout=timeout)

    def send(self, text: str) -> None:
        response = self.client.post(self.url, json={"text": text})
        response.raise_for_status()


def build_notifier(config: NotificationsConfig) -> Notifier:
    """Webhook notifier when a URL is configured, log notifier otherwise."""
    if config.webhook_url:
        return WebhookNotifier(config.webhook_url)
    return LogNotifier()
