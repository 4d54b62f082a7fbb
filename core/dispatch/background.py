"""
Background Dispatcher

Runs each accepted command as a detached asyncio task on the server's
event loop. The intake handler never joins these tasks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from core.dispatch.base import CommandExecutor


logger = logging.getLogger(__name__)


class TaskDispatcher:
    """
    Fire-and-forget dispatcher backed by asyncio tasks.

    `dispatch` must be called from a running event loop (any FastAPI
    request handler). Strong references to in-flight tasks are kept
    until they finish so they are not garbage collected mid-flight.

    Usage:
        dispatcher = TaskDispatcher(LogExecutor())
        dispatcher.dispatch("buy BTC", config.credentials)
        ...
        await dispatcher.drain()  # at shutdown
    """

    def __init__(self, executor: CommandExecutor) -> None:
        self.executor = executor
        self._tasks: set[asyncio.Task] = set()
        self._submitted = 0
        self._failed = 0

    @property
    def pending(self) -> int:
        """Number of dispatched commands still executing."""
        return len(self._tasks)

    @property
    def submitted(self) -> int:
        return self._submitted

    @property
    def failed(self) -> int:
        return self._failed

    def dispatch(self, message: str, credentials: Mapping[str, Any]) -> None:
        """Schedule execution of a message without waiting for it."""
        loop = asyncio.get_running_loop()
        self._submitted += 1
        task = loop.create_task(
            self._execute(message, credentials),
            name=f"dispatch-{self._submitted}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _execute(self, message: str, credentials: Mapping[str, Any]) -> None:
        try:
            await self.executor.execute_message(message, credentials)
        except asyncio.CancelledError:
            logger.warning("Command execution cancelled: %r", message)
            raise
        except Exception:
            self._failed += 1
            logger.exception(
                "Executor %s failed while processing message: %r",
                self.executor.name,
                message,
            )

    async def drain(self) -> None:
        """Wait for every in-flight command to finish."""
        if not self._tasks:
            return
        logger.info(f"Waiting for {len(self._tasks)} in-flight command(s) to finish...")
        await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain outstanding work and close the executor."""
        await self.drain()
        close = getattr(self.executor, "aclose", None)
        if close is not None:
            await close()
