"""
Module 01 - Message Signing
Authentication of inbound command messages.

Owner: Gateway Security
Module ID: M01

This module provides:
- Extraction of the inline `sig:<token>` signature from a message
- Verification under the `none`, `password` and `hash` signing methods
- Signing helpers used by operators to compose authenticated messages

Security Notes:
- The signature travels inside the message text because SMS/webhook
  transports only deliver a single text field
- `hash` signatures are the 16 hex chars at offset 16..31 of the
  HMAC-SHA256 digest, short enough to type into an SMS body
- Only the FIRST `sig:` token counts; removal for the canonical body is
  first-match-only
- Unrecognized signing methods verify nothing (fail closed)
"""
from __future__ import annotations

import hashlib
import hmac
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol


SIGNATURE_PATTERN = re.compile(r"sig:([a-zA-Z0-9]+)")

# Hex slice of the HMAC digest used as the short signature
HASH_SLICE_START = 16
HASH_SLICE_END = 32

_ALPHANUMERIC = re.compile(r"[a-zA-Z0-9]+")

# Characters removed around a canonical body. Senders compute signatures
# with ECMAScript String.prototype.trim(), whose set differs from
# str.isspace(): U+FEFF is trimmed, U+001C..U+001F and U+0085 are not.
TRIM_CHARACTERS = (
    "\t\n\v\f\r \u00a0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def trim(text: str) -> str:
    """Strip leading and trailing whitespace as senders do when signing."""
    return text.strip(TRIM_CHARACTERS)


class SigningError(ValueError):
    """Raised when a message cannot be signed as requested."""


class SigningMethod(str, Enum):
    """Supported signing methods."""
    NONE = "none"
    PASSWORD = "password"
    HASH = "hash"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SigningMethod"]:
        """
        Parse a configured signing method (case-insensitive).

        Only the empty string means `none`. Returns None for anything
        unrecognized, including a missing (None) value, so callers can
        fail closed.
        """
        if not isinstance(value, str):
            return None
        normalized = value.lower()
        if normalized == "":
            return cls.NONE
        try:
            return cls(normalized)
        except ValueError:
            return None


class SigningSettings(Protocol):
    """Anything carrying a signing method and a secret (e.g. SecurityConfig)."""
    signing_method: str
    secret: str


@dataclass(frozen=True)
class SignatureMatch:
    """
    Result of scanning a message for its signature.

    Attributes:
        token: The alphanumeric token after `sig:`, or "" when absent
        body: The canonical body - message with the first `sig:` token
              removed and surrounding whitespace stripped
    """
    token: str
    body: str

    @property
    def present(self) -> bool:
        return self.token != ""


def extract_signature(message: str) -> SignatureMatch:
    """
    Find the first `sig:<token>` in a message.

    This is the only place that decides what counts as "the signature";
    both password and hash verification go through it.

    Example:
        >>> extract_signature("buy BTC sig:abc123")
        SignatureMatch(token='abc123', body='buy BTC')
    """
    match = SIGNATURE_PATTERN.search(message)
    if match is None:
        return SignatureMatch(token="", body=trim(message))

    body = trim(SIGNATURE_PATTERN.sub("", message, count=1))
    return SignatureMatch(token=match.group(1), body=body)


def compute_hash_signature(body: str, secret: str) -> str:
    """
    Compute the short hash signature for a canonical body.

    Args:
        body: Canonical message body (signature already removed, stripped)
        secret: Shared secret used as the HMAC key

    Returns:
        16 lowercase hex characters (digest hex[16:32])
    """
    digest = hmac.new(
        secret.encode("utf-8"),
        body.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return digest[HASH_SLICE_START:HASH_SLICE_END]


def _tokens_equal(expected: str, actual: str) -> bool:
    return hmac.compare_digest(expected.encode("utf-8"), actual.encode("utf-8"))


def verify_signature(message: str, security: SigningSettings) -> bool:
    """
    Decide whether a message is authentic under the configured method.

    - none (or empty): always True
    - password: the extracted token must equal the secret exactly
    - hash: the extracted token must equal the short HMAC of the
      canonical body
    - anything else: False

    Args:
        message: Raw inbound message text
        security: Signing configuration (method + secret)

    Returns:
        True if the message is authentic
    """
    method = SigningMethod.parse(security.signing_method)
    if method is None:
        return False
    if method is SigningMethod.NONE:
        return True

    match = extract_signature(message)
    secret = security.secret or ""

    if method is SigningMethod.PASSWORD:
        return _tokens_equal(secret, match.token)

    expected = compute_hash_signature(match.body, secret)
    return _tokens_equal(expected, match.token)


def sign_message(body: str, method: str, secret: str) -> str:
    """
    Produce a message that verifies under the given method.

    Args:
        body: Command text to sign (must not already contain `sig:<token>`)
        method: Signing method name
        secret: Shared secret

    Returns:
        The body with a ` sig:<token>` suffix (unchanged for `none`)

    Raises:
        SigningError: If the method is unknown, the body already carries a
                      signature, or a password secret can never match
    """
    parsed = SigningMethod.parse(method)
    if parsed is None:
        raise SigningError(f"Unknown signing method: {method!r}")

    text = trim(body)
    if SIGNATURE_PATTERN.search(text):
        raise SigningError("Message already contains a sig: token")

    if parsed is SigningMethod.NONE:
        return text

    if parsed is SigningMethod.PASSWORD:
        if not _ALPHANUMERIC.fullmatch(secret or ""):
            raise SigningError("Password secrets must be non-empty and alphanumeric")
        token = secret
    else:
        token = compute_hash_signature(text, secret)

    return f"{text} sig:{token}" if text else f"sig:{token}"


def describe_security_risks(security: SigningSettings) -> list[str]:
    """
    List operator-facing warnings about a signing configuration.

    An empty list means nothing looks wrong.
    """
    method = SigningMethod.parse(security.signing_method)
    secret = security.secret or ""

    if method is None:
        return [
            f"Unknown signing method {security.signing_method!r}: "
            "every command will be rejected"
        ]
    if method is SigningMethod.NONE:
        return ["Message signing is disabled: any caller can submit commands"]

    warnings = []
    if secret == "":
        warnings.append(
            f"Signing method '{method.value}' is configured with an empty secret"
        )
    elif method is SigningMethod.PASSWORD and not _ALPHANUMERIC.fullmatch(secret):
        warnings.append(
            "Password secret contains non-alphanumeric characters and can never "
            "match a sig: token: every command will be rejected"
        )
    return warnings


__all__ = [
    "SIGNATURE_PATTERN",
    "SignatureMatch",
    "SigningError",
    "SigningMethod",
    "compute_hash_signature",
    "describe_security_risks",
    "extract_signature",
    "sign_message",
    "verify_signature",
]
