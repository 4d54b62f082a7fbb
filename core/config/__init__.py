"""
Runtime Configuration Module

Provides configuration loading for the Instabot gateway.
"""

from .runtime import (
    ConfigError,
    DispatcherConfig,
    GatewayConfig,
    NotificationsConfig,
    SecurityConfig,
    ServerConfig,
    load_gateway_config,
)

__all__ = [
    "ConfigError",
    "DispatcherConfig",
    "GatewayConfig",
    "NotificationsConfig",
    "SecurityConfig",
    "ServerConfig",
    "load_gateway_config",
]
