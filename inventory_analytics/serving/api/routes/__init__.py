"""
API Routes Module
"""
from .health import router as health_router
from .catalog import router as catalog_router
from .analytics import router as analytics_router
from .imports import router as imports_router

__all__ = [
    "health_router",
    "catalog_router",
    "analytics_router",
    "imports_router",
]
