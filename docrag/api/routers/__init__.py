"""API routers."""

from .collections import router as collections_router
from .health import router as health_router
from .query import router as query_router

__all__ = [
    "collections_router",
    "health_router",
    "query_router",
]
