"""
Runtime Configuration

Process-wide gateway configuration: listener, signing, dispatcher,
notifications and the opaque exchange credentials.

Loaded once at startup and immutable afterwards (frozen dataclasses,
credentials exposed as a read-only mapping).
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


ENV_PREFIX = "INSTABOT_"

REDACTED = "********"


class ConfigError(Exception):
    """Configuration could not be loaded or is unusable."""


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (file keys may be camelCase or snake_case)."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _as_path(value: Any) -> str:
    path = str(value).strip()
    return path if path.startswith("/") else f"/{path}"


@dataclass(frozen=True)
class SecurityConfig:
    """How inbound messages are authenticated."""
    signing_method: str = "none"
    secret: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SecurityConfig":
        method = _pick(data, "signingMethod", "signing_method", default="none")
        if method is None:
            raise ConfigError(
                "server.security.signingMethod is empty; "
                "set it to none, password or hash"
            )
        return cls(
            signing_method=str(method),
            secret=str(_pick(data, "secret", default="") or ""),
        )


@dataclass(frozen=True)
class ServerConfig:
    """HTTP listener settings."""
    url: str = "/trade"
    health_check: str = "/health"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    security: SecurityConfig = field(default_factory=SecurityConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServerConfig":
        defaults = cls()
        try:
            port = int(_pick(data, "port", default=defaults.port))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"server.port must be an integer: {e}") from e
        return cls(
            url=_as_path(_pick(data, "url", default=defaults.url)),
            health_check=_as_path(
                _pick(data, "healthCheck", "health_check", default=defaults.health_check)
            ),
            host=str(_pick(data, "host", default=defaults.host)),
            port=port,
            log_level=str(_pick(data, "logLevel", "log_level", default=defaults.log_level)).upper(),
            security=SecurityConfig.from_dict(data.get("security") or {}),
        )


@dataclass(frozen=True)
class DispatcherConfig:
    """
    Where accepted commands go.

    type: "log" (log only) or "http" (POST to a command engine)
    """
    type: str = "log"
    endpoint: str = ""
    timeout: float = 30.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DispatcherConfig":
        defaults = cls()
        try:
            timeout = float(_pick(data, "timeout", default=defaults.timeout))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"dispatcher.timeout must be a number: {e}") from e
        return cls(
            type=str(_pick(data, "type", default=defaults.type)).lower(),
            endpoint=str(_pick(data, "endpoint", default="") or ""),
            timeout=timeout,
        )


@dataclass(frozen=True)
class NotificationsConfig:
    """Operator alerts."""
    alert_on_startup: bool = False
    webhook_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NotificationsConfig":
        return cls(
            alert_on_startup=_as_bool(
                _pick(data, "alertOnStartup", "alert_on_startup", default=False)
            ),
            webhook_url=str(_pick(data, "webhookUrl", "webhook_url", default="") or ""),
        )


@dataclass(frozen=True)
class GatewayConfig:
    """
    Complete gateway configuration.

    Can be loaded from:
    - JSON or YAML file
    - Environment variables (always override file values)
    - Programmatic construction
    """
    server: ServerConfig = field(default_factory=ServerConfig)
    dispatcher: DispatcherConfig = field(default_factory=DispatcherConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    credentials: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.credentials, MappingProxyType):
            object.__setattr__(self, "credentials", MappingProxyType(dict(self.credentials)))

    @property
    def security(self) -> SecurityConfig:
        return self.server.security

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "GatewayConfig":
        """Load configuration from a dictionary (supports partial data)."""
        data = data or {}
        if not isinstance(data, Mapping):
            raise ConfigError("Configuration root must be a mapping")

        credentials = data.get("credentials") or {}
        if not isinstance(credentials, Mapping):
            raise ConfigError("credentials must be a mapping")

        return cls(
            server=ServerConfig.from_dict(data.get("server") or {}),
            dispatcher=DispatcherConfig.from_dict(data.get("dispatcher") or {}),
            notifications=NotificationsConfig.from_dict(data.get("notifications") or {}),
            credentials=credentials,
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "GatewayConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "GatewayConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "GatewayConfig":
        """Load from JSON or YAML depending on the file extension."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_env(cls) -> "GatewayConfig":
        """Defaults with environment variable overrides applied."""
        return cls().with_env_overrides()

    def with_env_overrides(self) -> "GatewayConfig":
        """
        Return a new config with environment variable overrides applied.

        Supported variables:
        - INSTABOT_URL, INSTABOT_HEALTH_CHECK, INSTABOT_HOST, INSTABOT_PORT
        - INSTABOT_LOG_LEVEL
        - INSTABOT_SIGNING_METHOD, INSTABOT_SECRET
        - INSTABOT_DISPATCHER_TYPE, INSTABOT_DISPATCHER_ENDPOINT
        - INSTABOT_ALERT_ON_STARTUP, INSTABOT_NOTIFY_WEBHOOK_URL
        """
        def env(name: str) -> Optional[str]:
            return os.getenv(f"{ENV_PREFIX}{name}")

        server_changes: dict[str, Any] = {}
        if env("URL"):
            server_changes["url"] = _as_path(env("URL"))
        if env("HEALTH_CHECK"):
            server_changes["health_check"] = _as_path(env("HEALTH_CHECK"))
        if env("HOST"):
            server_changes["host"] = env("HOST")
        if env("PORT"):
            try:
                server_changes["port"] = int(env("PORT"))
            except ValueError as e:
                raise ConfigError(f"{ENV_PREFIX}PORT must be an integer: {e}") from e
        if env("LOG_LEVEL"):
            server_changes["log_level"] = env("LOG_LEVEL").upper()

        security_changes: dict[str, Any] = {}
        if env("SIGNING_METHOD") is not None:
            security_changes["signing_method"] = env("SIGNING_METHOD")
        if env("SECRET") is not None:
            security_changes["secret"] = env("SECRET")
        if security_changes:
            server_changes["security"] = replace(self.server.security, **security_changes)

        dispatcher_changes: dict[str, Any] = {}
        if env("DISPATCHER_TYPE"):
            dispatcher_changes["type"] = env("DISPATCHER_TYPE").lower()
        if env("DISPATCHER_ENDPOINT"):
            dispatcher_changes["endpoint"] = env("DISPATCHER_ENDPOINT")

        notification_changes: dict[str, Any] = {}
        if env("ALERT_ON_STARTUP"):
            notification_changes["alert_on_startup"] = _as_bool(env("ALERT_ON_STARTUP"))
        if env("NOTIFY_WEBHOOK_URL"):
            notification_changes["webhook_url"] = env("NOTIFY_WEBHOOK_URL")

        if not (server_changes or dispatcher_changes or notification_changes):
            return self

        return replace(
            self,
            server=replace(self.server, **server_changes),
            dispatcher=replace(self.dispatcher, **dispatcher_changes),
            notifications=replace(self.notifications, **notification_changes),
        )

    def to_dict(self, redact: bool = True) -> dict[str, Any]:
        """Convert to the on-disk (camelCase) layout."""
        secret = self.security.secret
        return {
            "server": {
                "url": self.server.url,
                "healthCheck": self.server.health_check,
                "host": self.server.host,
                "port": self.server.port,
                "logLevel": self.server.log_level,
                "security": {
                    "signingMethod": self.security.signing_method,
                    "secret": REDACTED if (redact and secret) else secret,
                },
            },
            "dispatcher": {
                "type": self.dispatcher.type,
                "endpoint": self.dispatcher.endpoint,
                "timeout": self.dispatcher.timeout,
            },
            "notifications": {
                "alertOnStartup": self.notifications.alert_on_startup,
                "webhookUrl": self.notifications.webhook_url,
            },
            "credentials": (
                {key: REDACTED for key in self.credentials}
                if redact else copy.deepcopy(dict(self.credentials))
            ),
        }


def default_config_paths() -> list[Path]:
    """Config file search order when no explicit path is given."""
    return [
        Path.cwd() / "instabot.json",
        Path.cwd() / ".instabot.json",
        Path.cwd() / "instabot.yaml",
        Path.home() / ".config" / "instabot" / "config.json",
    ]


def load_gateway_config(path: Optional[str | Path] = None) -> GatewayConfig:
    """
    Load GatewayConfig from a config file, then overlay environment variables.

    Args:
        path: Explicit config file. When None the default locations are
              searched and the first existing file is used.

    Raises:
        ConfigError: If the explicit file is missing or any file is unreadable
    """
    config: GatewayConfig | None = None

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        config = GatewayConfig.from_file(path)
        logger.info(f"Loaded config from {path}")
    else:
        for candidate in default_config_paths():
            if candidate.exists():
                config = GatewayConfig.from_file(candidate)
                logger.info(f"Loaded config from {candidate}")
                break

    if config is None:
        config = GatewayConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Template written by `instabot config --init`."""
    return """{
  "server": {
    "url": "/trade",
    "healthCheck": "/health",
    "host": "0.0.0.0",
    "port": 8080,
    "logLevel": "INFO",
    "security": {
      "signingMethod": "hash",
      "secret": "change-me"
    }
  },
  "dispatcher": {
    "type": "log",
    "endpoint": "",
    "timeout": 30
  },
  "notifications": {
    "alertOnStartup": false,
    "webhookUrl": ""
  },
  "credentials": {}
}
"""
