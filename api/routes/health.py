"""
Module 02 - Health Check Route

Liveness probe for load balancers. Touches no configuration and no
dispatcher, so it answers even when signing is misconfigured.
"""

from fastapi import APIRouter
from fastapi.responses import Response


async def health_check() -> Response:
    """
    Health check endpoint.

    Always 200 with an empty body.
    """
    return Response(status_code=200)


def create_router(path: str = "/health") -> APIRouter:
    """Bind the health check to the configured path."""
    router = APIRouter(tags=["health"])
    router.add_api_route(
        path,
        health_check,
        methods=["GET"],
        response_class=Response,
        summary="Liveness probe",
    )
    return router
