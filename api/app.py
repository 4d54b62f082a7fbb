"""
Module 02 - FastAPI Application

Main application setup and configuration.

Usage:
    instabot serve

    # Or through uvicorn directly
    uvicorn --factory api.app:create_app
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request

from api.errors import CORS_HEADERS, IntakeError, generic_error_handler, intake_error_handler
from api.routes import command, health
from core.config.runtime import GatewayConfig, load_gateway_config
from core.crypto.signing import describe_security_risks
from core.dispatch import Dispatcher, build_dispatcher
from core.notifications import Notifier, build_notifier


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def send_startup_alert(notifier: Notifier, started_at: datetime) -> None:
    """Send the startup alert; failures are logged and swallowed."""
    try:
        await asyncio.to_thread(
            notifier.send,
            f"Instabot gateway starting up at {started_at.isoformat()}.",
        )
    except Exception as e:
        logger.warning(f"Failed to send startup alert: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: GatewayConfig = app.state.config
    started_at = datetime.now(timezone.utc)

    logger.info("=================================================")
    logger.info("  Instabot gateway starting")
    logger.info("=================================================")
    logger.info(f"Started at {started_at.isoformat()}")
    for warning in describe_security_risks(config.security):
        logger.warning(warning)

    if config.notifications.alert_on_startup:
        await send_startup_alert(app.state.notifier, started_at)

    logger.info(
        "Server is listening for commands at "
        f"http://localhost:{config.server.port}{config.server.url}"
    )

    yield

    close = getattr(app.state.dispatcher, "aclose", None)
    if close is not None:
        await close()
    logger.info("Instabot gateway stopped")


def create_app(
    config: GatewayConfig | None = None,
    *,
    dispatcher: Dispatcher | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Gateway configuration. When None it is loaded from the
                default config file locations and environment, and
                logging is configured from it.
        dispatcher: Dispatcher for accepted commands (default: built from
                    config.dispatcher)
        notifier: Alert channel (default: built from config.notifications)
    """
    if config is None:
        config = load_gateway_config()
        logging.basicConfig(
            level=getattr(logging, config.server.log_level, logging.INFO),
            format=LOG_FORMAT,
        )

    app = FastAPI(
        title="Instabot Gateway",
        description="""
Authenticated command intake for SMS and webhook senders.

## Endpoints

- **POST** the command URL - URL-encoded form with `subject`, `Body` or `message`
- **GET** the health check URL - liveness probe

## Signing

Messages carry an inline `sig:<token>` checked according to the
configured signing method (`none`, `password` or `hash`).
        """,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.dispatcher = dispatcher if dispatcher is not None else build_dispatcher(config.dispatcher)
    app.state.notifier = notifier if notifier is not None else build_notifier(config.notifications)

    @app.middleware("http")
    async def allow_any_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    # Register exception handlers
    app.add_exception_handler(IntakeError, intake_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.create_router(config.server.health_check))
    app.include_router(command.create_router(config.server.url))

    return app

