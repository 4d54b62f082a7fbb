"""
Module 02 - API Dependencies

Dependency injection for the API. The configuration and dispatcher are
built once by create_app and stored on app.state; request handlers
receive them through these providers.
"""

from __future__ import annotations

from fastapi import Request

from core.config.runtime import GatewayConfig, SecurityConfig
from core.dispatch import Dispatcher


def get_gateway_config(request: Request) -> GatewayConfig:
    """The process-wide configuration."""
    return request.app.state.config


def get_security_config(request: Request) -> SecurityConfig:
    """Signing configuration used by the intake handler."""
    return request.app.state.config.security


def get_dispatcher(request: Request) -> Dispatcher:
    """The fire-and-forget dispatcher for validated commands."""
    return request.app.state.dispatcher
