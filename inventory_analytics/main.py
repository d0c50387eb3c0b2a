"""
FastAPI Production Application

Main entry point for the Inventory Profitability Analytics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from inventory_analytics.config import get_settings
from inventory_analytics.config.logging import configure_logging
from inventory_analytics.database.connection import init_database, close_database
from inventory_analytics.serving.api.errors import register_exception_handlers
from inventory_analytics.serving.api.middleware import RequestLoggingMiddleware
from inventory_analytics.serving.api.routes import (
    health_router,
    catalog_router,
    analytics_router,
    imports_router,
)
from inventory_analytics.serving.session import SessionRegistry

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Inventory Analytics API")

    try:
        await init_database(create_tables=not get_settings().is_production)
        logger.info("Database initialized")
    except Exception as e:
        logger.warning("Database init failed", error=str(e))

    yield

    logger.info("Shutting down...")
    await close_database()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Each app owns its own session registry.
    """
    settings = get_settings()

    app = FastAPI(
        title="Inventory Profitability Analytics API",
        description="Inventory, sales and profitability reporting for small businesses",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.sessions = SessionRegistry()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Session-ID", "Content-Disposition"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(catalog_router, prefix="/api/v1", tags=["Catalog"])
    app.include_router(analytics_router, prefix="/api/v1", tags=["Analytics"])
    app.include_router(imports_router, prefix="/api/v1", tags=["Imports"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app


app = create_app()
