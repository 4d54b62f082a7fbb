"""
Core cryptographic utilities.

Module 01 provides inline message signing and verification.
"""
from .signing import (
    SIGNATURE_PATTERN,
    SignatureMatch,
    SigningError,
    SigningMethod,
    compute_hash_signature,
    describe_security_risks,
    extract_signature,
    sign_message,
    verify_signature,
)

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
