"""
ProfileAPI FastAPI application entry point.

Routes: GET /profile, PUT /profile, GET /health
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app import __version__
from app.config import get_settings
from app.db.session import check_db_connection, engine
from app.services.errors import ProfileError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("ProfileAPI starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise

        yield
    finally:
        logger.info("ProfileAPI shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def error_envelope(error: ProfileError) -> dict:
    """Client-facing body for a ProfileError."""
    content: dict = {"success": False, "error": error.message}
    if error.details is not None:
        content["details"] = error.details
    return content


async def handle_profile_error(request: Request, exc: ProfileError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s rejected (%d): %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An unexpected error occurred."},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_exception_handler(ProfileError, handle_profile_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Mount API routes
    from app.api.profile import router as profile_router

    app.include_router(profile_router, prefix="/profile", tags=["profile"])

    @app.get("/health")
    def health() -> JSONResponse:
        """Liveness plus database reachability; 503 when the pool cannot connect."""
        try:
            check_db_connection()
        except Exception as exc:
            logger.warning("Health check: database unreachable: %s", exc)
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "version": __version__, "database": "disconnected"},
            )
        return JSONResponse(
            content={"status": "ok", "version": __version__, "database": "connected"}
        )

    return app


app = create_app()
