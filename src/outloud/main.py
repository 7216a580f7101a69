"""Entry point: logging setup and the reading-history web app."""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI

from outloud.api.routes import router
from outloud.config import Settings, load_settings
from outloud.storage.sessions import SessionStore


def configure_logging(production: bool | None = None) -> None:
    """Configure structlog once for the process.

    JSON lines at INFO when ``ENV=production``, coloured console output at
    DEBUG otherwise.
    """
    if production is None:
        production = os.getenv("ENV", "development").lower() == "production"

    renderer = (
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if production else logging.DEBUG
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around a session store taken from settings."""
    settings = settings or load_settings()
    app = FastAPI(title="OutLoud", version="0.1.0")
    app.state.settings = settings
    app.state.store = SessionStore(
        settings.sessions_dir, max_sessions=settings.max_session_history
    )
    app.include_router(router)
    structlog.get_logger().info(
        "app_created", sessions=str(app.state.store.path), configured=settings.is_configured
    )
    return app


def main() -> None:
    configure_logging()
    settings = load_settings()
    uvicorn.run(
        "outloud.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
