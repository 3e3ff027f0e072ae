"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from capture_narrator.api.account import router as account_router
from capture_narrator.api.captures import router as captures_router
from capture_narrator.api.history import router as history_router
from capture_narrator.app_logging import configure_logging
from capture_narrator.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info(
            "Shutting down",
            extra={"open_captures": len(app.state.container.capture_sessions)},
        )
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(account_router)
    app.include_router(captures_router)
    app.include_router(history_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
