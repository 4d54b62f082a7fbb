"""
Module 04 - CLI Verify Command

Check a message against the configured signing method offline, exactly
as the intake endpoint would.

Usage:
    instabot verify "buy BTC 0.1 sig:1a2b3c4d5e6f7a8b" [--json]
"""

from __future__ import annotations

import json
from argparse import Namespace
from dataclasses import asdict, dataclass

from core.crypto.signing import SigningMethod, extract_signature, verify_signature


# Exit codes
EXIT_SUCCESS = 0
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of a message verification for CLI output."""
    method: str
    valid: bool
    signature_present: bool
    body: str

    def to_dict(self) -> dict:
        return asdict(self)


def build_summary(message: str, method: str, valid: bool) -> VerifySummary:
    match = extract_signature(message)
    parsed = SigningMethod.parse(method)
    return VerifySummary(
        method=parsed.value if parsed else f"{method} (unrecognized)",
        valid=valid,
        signature_present=match.present,
        body=match.body,
    )


def print_summary_human(summary: VerifySummary) -> None:
    print(f"method: {summary.method}")
    print(f"signature_present: {str(summary.signature_present).lower()}")
    print(f"body: {summary.body}")
    print(f"valid: {str(summary.valid).lower()}")


def verify_cmd(args: Namespace) -> int:
    """Execute the verify command."""
    security = args.gateway_config.security
    valid = verify_signature(args.message, security)
    summary = build_summary(args.message, security.signing_method, valid)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
