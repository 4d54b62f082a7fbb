"""
Command Dispatch

Hands validated messages to the command-execution engine without
blocking the HTTP response.
"""

from __future__ import annotations

from core.config.runtime import ConfigError, DispatcherConfig
from core.dispatch.background import TaskDispatcher
from core.dispatch.base import BaseExecutor, CommandExecutor, Dispatcher
from core.dispatch.executors import HttpForwardExecutor, LogExecutor


def build_executor(config: DispatcherConfig) -> BaseExecutor:
    """
    Create the executor selected by `dispatcher.type`.

    Raises:
        ConfigError: For unknown types or an http type without endpoint
    """
    if config.type == "log":
        return LogExecutor()
    if config.type == "http":
        if not config.endpoint:
            raise ConfigError("dispatcher.endpoint is required when dispatcher.type is 'http'")
        return HttpForwardExecutor(config.endpoint, timeout=config.timeout)
    raise ConfigError(f"Unknown dispatcher type: {config.type!r} (expected 'log' or 'http')")


def build_dispatcher(config: DispatcherConfig) -> TaskDispatcher:
    """Create a TaskDispatcher around the configured executor."""
    return TaskDispatcher(build_executor(config))


__all__ = [
    "BaseExecutor",
    "CommandExecutor",
    "Dispatcher",
    "HttpForwardExecutor",
    "LogExecutor",
    "TaskDispatcher",
    "build_dispatcher",
    "build_executor",
]
