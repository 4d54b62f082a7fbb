"""Operator notification channels."""

from .notifier import LogNotifier, Notifier, WebhookNotifier, build_notifier

__all__ = [
    "LogNotifier",
    "Notifier",
    "WebhookNotifier",
    "build_notifier",
]
