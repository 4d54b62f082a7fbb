"""
Command Executors

Executors shipped with the gateway:
- LogExecutor: records accepted commands in the log (local/dev use)
- HttpForwardExecutor: forwards accepted commands to an external
  command engine over HTTP
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from core.dispatch.base import BaseExecutor
from core.http import HttpClient


logger = logging.getLogger(__name__)


class LogExecutor(BaseExecutor):
    """Logs each accepted command and does nothing else."""

    _name = "LogExecutor"

    def __init__(self) -> None:
        self.executed = 0

    async def execute_message(self, message: str, credentials: Mapping[str, Any]) -> None:
        self.executed += 1
        logger.info(
            "Accepted command (no execution engine configured): %r [credential sets: %s]",
            message,
            ", ".join(sorted(credentials)) or "none",
        )


class HttpForwardExecutor(BaseExecutor):
    """
    POSTs accepted commands to a command engine.

    Payload:
        {"message": "<raw message>", "credentials": {...}}

    A non-2xx response raises HttpError, which the dispatcher logs.
    """

    _name = "HttpForwardExecutor"

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 30.0,
        client: HttpClient | None = None,
    ) -> None:
        if not endpoint:
            raise ValueError("HttpForwardExecutor requires an endpoint")
        self.endpoint = endpoint
        self.client = client or HttpClient(
            timeout=timeout,
            default_headers={"Content-Type": "application/json"},
        )

    def _forward(self, message: str, credentials: Mapping[str, Any]) -> None:
        response = self.client.post(
            self.endpoint,
            json={"message": message, "credentials": dict(credentials)},
        )
        response.raise_for_status()
        logger.info(
            "Forwarded command to %s (HTTP %s, %.0f ms)",
            self.endpoint,
            response.status_code,
            response.elapsed_ms,
        )

    async def execute_message(self, message: str, credentials: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._forward, message, credentials)

    async def aclose(self) -> None:
        self.client.close()
