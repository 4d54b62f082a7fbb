"""
Dispatch Interfaces

The boundary between the intake API and the command-execution engine.

- Dispatcher: what the intake handler calls. `dispatch` only schedules
  work and must return immediately.
- CommandExecutor: what actually interprets a message (parsing, exchange
  calls, order placement). Lives outside the gateway; the gateway only
  ships a log-only and an HTTP-forwarding implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Dispatcher(Protocol):
    """
    Protocol for fire-and-forget command dispatch.

    Implementations own all downstream error handling; nothing raised
    during execution may reach the caller of `dispatch`.
    """

    def dispatch(self, message: str, credentials: Mapping[str, Any]) -> None:
        """Submit a validated message for execution and return at once."""
        ...


@runtime_checkable
class CommandExecutor(Protocol):
    """Protocol for the engine that executes a validated message."""

    @property
    def name(self) -> str:
        ...

    async def execute_message(self, message: str, credentials: Mapping[str, Any]) -> None:
        ...


class BaseExecutor(ABC):
    """
    Base class for command executors.

    Subclasses implement `execute_message`. Exceptions are allowed to
    propagate; the dispatcher logs them.
    """

    _name: str = "BaseExecutor"

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    async def execute_message(self, message: str, credentials: Mapping[str, Any]) -> None:
        """Execute the commands contained in a message."""
        ...

    async def aclose(self) -> None:
        """Release resources held by the executor."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
