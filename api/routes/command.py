"""
Module 02 - Command Intake Route

Receives SMS/webhook commands, authenticates them and hands them to the
dispatcher.

Flow:
1. Extract the message from `subject`, `Body` or `message` (in that order)
2. Verify the inline signature (fail closed)
3. Dispatch fire-and-forget
4. Echo the message back with 200 ("accepted", not "executed")
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from api.deps import get_dispatcher, get_gateway_config, get_security_config
from api.errors import InvalidSignatureError, MissingMessageError
from api.models.requests import InboundCommand
from core.config.runtime import GatewayConfig, SecurityConfig
from core.crypto.signing import verify_signature
from core.dispatch import Dispatcher


logger = logging.getLogger(__name__)


def extract_message(fields: dict[str, Any]) -> str:
    """
    Pick the command text out of the decoded form.

    Returns "" when no recognized field holds a non-empty string.
    """
    try:
        command = InboundCommand.model_validate(fields)
    except ValidationError:
        return ""
    return command.text


def is_authentic(message: str, security: SecurityConfig) -> bool:
    """Run the verifier; any exception counts as a rejection."""
    try:
        return verify_signature(message, security)
    except Exception:
        logger.exception("Signature verification raised - treating message as invalid")
        return False


async def receive_command(
    request: Request,
    security: SecurityConfig = Depends(get_security_config),
    config: GatewayConfig = Depends(get_gateway_config),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> PlainTextResponse:
    """
    Accept a command for processing.

    Responds 200 with the message echoed once it has been handed to the
    dispatcher, 400 with an empty body when the message is missing or
    its signature is invalid.
    """
    logger.info("HTTP POST request received...")

    try:
        form = await request.form()
    except (StarletteHTTPException, MultiPartException) as e:
        logger.warning(
            "Request did not include a message. "
            f"Request body could not be read: {getattr(e, 'detail', None) or e}"
        )
        raise MissingMessageError() from e
    fields = {key: form.get(key) for key in form.keys()}

    message = extract_message(fields)
    if message == "":
        logger.warning(
            "Request did not include a message. "
            "POST messages in a variable called subject, Body or message. "
            f"Request body: {fields}"
        )
        raise MissingMessageError(details=fields)

    if not is_authentic(message, security):
        logger.error(f"Message has an invalid signature - discarding. Request body: {fields}")
        raise InvalidSignatureError(details=fields)

    dispatcher.dispatch(message, config.credentials)
    logger.info(f"Message accepted for processing: {message!r}")

    return PlainTextResponse(message)


def create_router(path: str = "/trade") -> APIRouter:
    """Bind the command intake to the configured path."""
    router = APIRouter(tags=["commands"])
    router.add_api_route(
        path,
        receive_command,
        methods=["POST"],
        response_class=PlainTextResponse,
        summary="Submit a signed command",
    )
    return router
