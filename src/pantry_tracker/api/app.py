"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from pantry_tracker.api.auth import router as auth_router
from pantry_tracker.api.inventory import router as inventory_router
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.containers import AppContainer
from pantry_tracker.services.auth import NotAuthenticatedError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Pantry Tracker")
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(inventory_router)

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated(
        request: Request, exc: NotAuthenticatedError
    ) -> JSONResponse:
        logger.info("Unauthenticated request: path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
