"""
Module 04 - CLI Serve Command

Bind the listener and run the gateway under uvicorn.

The socket is bound here rather than inside uvicorn so that an
address-in-use condition can be reported distinctly. There is no retry:
the operator fixes the configuration and restarts.

Usage:
    instabot serve [--host HOST] [--port PORT]
"""

from __future__ import annotations

import errno
import logging
import socket
from argparse import Namespace
from dataclasses import replace

import uvicorn

from api.app import create_app
from core.config.runtime import GatewayConfig


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug"}


class ListenerBindError(Exception):
    """The listener socket could not be bound."""

    def __init__(self, host: str, port: int, cause: OSError) -> None:
        self.host = host
        self.port = port
        self.cause = cause
        super().__init__(f"Cannot listen on {host}:{port}: {cause.strerror or cause}")

    @property
    def address_in_use(self) -> bool:
        return self.cause.errno == errno.EADDRINUSE


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Create a TCP socket bound to host:port (not yet listening).

    Raises:
        ListenerBindError: If the address cannot be bound
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise ListenerBindError(host, port, e) from e
    sock.set_inheritable(True)
    return sock


def apply_listener_overrides(config: GatewayConfig, host: str | None, port: int | None) -> GatewayConfig:
    """Return config with --host/--port applied."""
    changes = {}
    if host:
        changes["host"] = host
    if port is not None:
        changes["port"] = port
    if not changes:
        return config
    return replace(config, server=replace(config.server, **changes))


def serve_cmd(args: Namespace) -> int:
    """Execute the serve command."""
    config = apply_listener_overrides(args.gateway_config, args.host, args.port)
    app = create_app(config)

    try:
        sock = bind_socket(config.server.host, config.server.port)
    except ListenerBindError as e:
        logger.error("Error starting server")
        logger.error(str(e))
        if e.address_in_use:
            logger.error(f"The port {config.server.port} is already in use.")
        return EXIT_RUNTIME_ERROR

    level = config.server.log_level.lower()
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            log_level=level if level in _UVICORN_LEVELS else None,
        )
    )
    try:
        server.run(sockets=[sock])
    finally:
        sock.close()

    return EXIT_SUCCESS
