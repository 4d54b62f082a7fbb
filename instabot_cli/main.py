"""
Module 04 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    instabot serve [--host HOST] [--port PORT]
    instabot sign "<text>" [--method METHOD] [--secret SECRET] [--json]
    instabot verify "<message>" [--json]
    instabot config --init [--path PATH]
    instabot config --show

Environment Variables:
    INSTABOT_PORT               Listener port (default: 8080)
    INSTABOT_SIGNING_METHOD     none, password or hash
    INSTABOT_SECRET             Shared signing secret
    INSTABOT_LOG_LEVEL          Log level (default: INFO)
    INSTABOT_DISPATCHER_TYPE    log or http
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from instabot_cli import __version__
from instabot_cli.commands import serve, sign, verify
from core.config.runtime import ConfigError, get_default_config_template, load_gateway_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="instabot",
        description="Instabot gateway - receive signed commands over HTTP and forward them for execution.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./instabot.json or ~/.config/instabot/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve command ---
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP gateway",
        description="Bind the listener and accept commands until interrupted.",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Bind address (default: server.host from config)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Listener port (default: server.port from config)",
    )
    serve_parser.set_defaults(func=serve.serve_cmd)

    # --- sign command ---
    sign_parser = subparsers.add_parser(
        "sign",
        help="Sign a command message",
        description="Append a sig: token so the message passes verification.",
    )
    sign_parser.add_argument(
        "text",
        type=str,
        help="Command text to sign",
    )
    sign_parser.add_argument(
        "--method",
        type=str,
        default=None,
        help="Signing method: none, password or hash (default: from config)",
    )
    sign_parser.add_argument(
        "--secret",
        type=str,
        default=None,
        help="Shared secret (default: from config)",
    )
    sign_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    sign_parser.set_defaults(func=sign.sign_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check a message signature offline",
        description="Verify a message exactly as the intake endpoint would.",
    )
    verify_parser.add_argument(
        "message",
        type=str,
        help="Message including its sig: token",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage gateway configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show the effective configuration (secrets redacted)",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="instabot.json",
        help="Path for config file (default: instabot.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to set your signing secret and credentials.")
        print("You can also use environment variables (INSTABOT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.gateway_config.to_dict(redact=True), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: instabot config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_gateway_config(args.config)
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    setup_logging(level=args.log_level or config.server.log_level)

    # Attach config to args for commands to use
    args.gateway_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        logging.getLogger(__name__).debug(traceback.format_exc())
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
