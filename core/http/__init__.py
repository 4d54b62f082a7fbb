"""
HTTP Client Module

Blocking HTTP client shared by the command forwarder and alert webhooks.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
