"""Main FastAPI application for the Account API."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

import asyncpg
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db.connection import db_manager, get_db_pool
from .errors import register_exception_handlers
from .errors.problem_details import ServiceUnavailableError
from .routes import routers

SERVICE_NAME = "Account API"
VERSION = "1.0.0"

# Configure logging
settings = get_settings()
logging.basicConfig(level=settings.log_level, format=settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {SERVICE_NAME} in mode {get_settings().mode!r}")

    try:
        await db_manager.initialize()
        logger.info("Database connection pool initialized")
    except (OSError, asyncpg.PostgresError) as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}")
    await db_manager.close()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=SERVICE_NAME,
        description="User accounts, API tokens, uploads, pins and billing of the storage service",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    # Configure CORS; pagination headers must be readable by browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=["Count", "Size", "Page", "Link", "Location"]
    )

    # Register exception handlers
    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    @app.get("/health", tags=["Health"])
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint with database connectivity test."""
        try:
            pool = await get_db_pool()
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Health check failed: {e}")
            raise ServiceUnavailableError(
                detail="Database connection failed",
                database_error=str(e)
            )

        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": VERSION,
            "database": "connected"
        }

    # Ready check endpoint (Kubernetes style)
    @app.get("/ready", tags=["Health"])
    async def ready_check() -> Dict[str, Any]:
        """Readiness check endpoint."""
        try:
            pool = await get_db_pool()
            async with pool.acquire() as conn:
                await conn.execute("SELECT 1")
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Readiness check failed: {e}")
            raise ServiceUnavailableError(
                detail="Service not ready",
                database_error=str(e)
            )

        return {
            "status": "ready",
            "service": SERVICE_NAME,
            "mode": get_settings().mode
        }

    # Live check endpoint (Kubernetes style)
    @app.get("/live", tags=["Health"])
    async def liveness_check() -> Dict[str, str]:
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": SERVICE_NAME
        }

    @app.get("/", tags=["Root"])
    async def root() -> Dict[str, str]:
        """Root endpoint with API information."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "docs": "/docs",
            "health": "/health"
        }

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "account_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
