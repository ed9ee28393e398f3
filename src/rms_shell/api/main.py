"""FastAPI application entry point."""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rms_shell import __version__
from rms_shell.api.routers import branding, health, session
from rms_shell.bootstrap import ShellContainer, build_container
from rms_shell.core.config import get_settings
from rms_shell.services.api_client import ApiError

logger = logging.getLogger(__name__)


def create_app(container: ShellContainer | None = None) -> FastAPI:
    """
    Build the app. Without a container, one is built from settings at startup.

    A container passed in is used as-is and is not started or closed by the
    lifespan, so callers own its lifecycle.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if container is not None:
            yield
            return
        settings = get_settings()
        logging.basicConfig(level=settings.log_level.upper())
        built = build_container(settings)
        app.state.container = built
        await built.start()
        try:
            yield
        finally:
            await built.aclose()

    app = FastAPI(
        title="RMS Shell",
        description="Branding-gated client shell for the RMS platform.",
        version=__version__,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        logger.warning(
            "upstream_api_error",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code or 502,
            content={"detail": exc.message},
        )

    app.include_router(health.router)
    app.include_router(branding.router)
    app.include_router(session.router)
    return app


app = create_app()
