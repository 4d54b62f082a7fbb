"""
Module 04 - CLI Sign Command

Produce a signed message ready to paste into an SMS or webhook.

Usage:
    instabot sign "buy BTC 0.1" [--method hash] [--secret S] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.signing import SigningError, sign_message


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def sign_cmd(args: Namespace) -> int:
    """Execute the sign command. Method and secret default to the config."""
    security = args.gateway_config.security
    method = args.method or security.signing_method
    secret = args.secret if args.secret is not None else security.secret

    try:
        signed = sign_message(args.text, method, secret)
    except SigningError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({"method": method.lower(), "message": signed}, indent=2))
    else:
        print(signed)
    return EXIT_SUCCESS
