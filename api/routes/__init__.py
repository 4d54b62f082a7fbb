"""API route handlers."""

from api.routes import command, health

__all__ = ["command", "health"]
