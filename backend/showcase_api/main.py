"""FastAPI application entry point with startup initialisation and logging."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from showcase_api.config import settings
from showcase_api.constants import WS_CLOSE_GOING_AWAY
from showcase_api.routers.health import router as health_router
from showcase_api.routers.notification_socket import init_notification_socket
from showcase_api.routers.notifications import router as notifications_router


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    root_logger = logging.getLogger("showcase_api")
    root_logger.setLevel(settings.log_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


_configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Drain notification sockets on shutdown."""
    yield
    await app.state.connection_registry.close_all(code=WS_CLOSE_GOING_AWAY)


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    init_notification_socket(app)
    app.include_router(notifications_router)
    app.include_router(health_router)
    return app


app = create_app()
