"""API request models."""

from api.models.requests import MESSAGE_FIELDS, InboundCommand

__all__ = [
    "MESSAGE_FIELDS",
    "InboundCommand",
]
