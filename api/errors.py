"""
Module 02 - API Error Handling

Intake rejections are raised as IntakeError subclasses and rendered as
bare status codes: SMS gateways and webhook senders only look at the
status, so error bodies are empty.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import Response


logger = logging.getLogger(__name__)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


class IntakeError(Exception):
    """Base intake error carrying the HTTP status to answer with."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class MissingMessageError(IntakeError):
    """Request carried none of the recognized message fields."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(
            code="MISSING_MESSAGE",
            message="Request did not include a message",
            status_code=400,
            details=details,
        )


class InvalidSignatureError(IntakeError):
    """Message failed signature verification (includes unknown signing methods)."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__(
            code="INVALID_SIGNATURE",
            message="Message has an invalid signature",
            status_code=400,
            details=details,
        )


async def intake_error_handler(request: Request, exc: IntakeError) -> Response:
    """Render an IntakeError as an empty-body response."""
    return Response(status_code=exc.status_code)


async def generic_error_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return Response(status_code=500, headers=CORS_HEADERS)
