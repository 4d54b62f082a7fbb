"""
Common test fixtures.

Factories and fakes shared by the gateway tests.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.config.runtime import (
    DispatcherConfig,
    GatewayConfig,
    NotificationsConfig,
    SecurityConfig,
    ServerConfig,
)
from core.dispatch import BaseExecutor


# Known-good vectors: HMAC-SHA256(key="s3cret", msg=body).hexdigest()[16:32]
HASH_SECRET = "s3cret"
HASH_VECTORS = {
    "buy BTC 0.1": "31673f1bb46e0afe",
    "long(BTCUSD, 0.5)": "6d63df41d1b56727",
    "hello": "c697f787c7aff885",
}
# Same body, empty key
EMPTY_KEY_VECTOR = ("buy BTC 0.1", "957824457a438c4c")


def make_config(
    signing_method: str = "none",
    secret: str = "",
    *,
    url: str = "/trade",
    health_check: str = "/health",
    port: int = 8080,
    credentials: Mapping[str, Any] | None = None,
    alert_on_startup: bool = False,
) -> GatewayConfig:
    """Create a GatewayConfig for tests."""
    return GatewayConfig(
        server=ServerConfig(
            url=url,
            health_check=health_check,
            port=port,
            security=SecurityConfig(signing_method=signing_method, secret=secret),
        ),
        dispatcher=DispatcherConfig(type="log"),
        notifications=NotificationsConfig(alert_on_startup=alert_on_startup),
        credentials=credentials if credentials is not None else {"bitfinex": {"key": "k", "secret": "s"}},
    )


class RecordingDispatcher:
    """Dispatcher that records submissions instead of executing them."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Mapping[str, Any]]] = []

    def dispatch(self, message: str, credentials: Mapping[str, Any]) -> None:
        self.calls.append((message, credentials))

    @property
    def messages(self) -> list[str]:
        return [message for message, _ in self.calls]


class BrokenDispatcher:
    """Dispatcher whose submission itself blows up."""

    def dispatch(self, message: str, credentials: Mapping[str, Any]) -> None:
        raise RuntimeError("dispatcher offline")


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[str] = []
        self.fail = fail

    def send(self, text: str) -> None:
        if self.fail:
            raise ConnectionError("webhook unreachable")
        self.sent.append(text)


class RecordingExecutor(BaseExecutor):
    """Executor that records calls, optionally failing."""

    _name = "RecordingExecutor"

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[tuple[str, Mapping[str, Any]]] = []
        self.error = error
        self.closed = False

    async def execute_message(self, message: str, credentials: Mapping[str, Any]) -> None:
        self.calls.append((message, credentials))
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True
