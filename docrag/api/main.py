"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, docrag.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docrag.api.deps import get_service_cache
from docrag.configs import Settings, get_settings
from docrag.core.exceptions import DocRAGException
from docrag.observability.logger import configure_logging
from docrag.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import collections_router, health_router, query_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and pre-warms the RAG service on startup.
    """
    cache = get_service_cache()
    configure_logging(cache.settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    logger.info("Pre-warming RAG service...")
    try:
        await cache.rag_service.initialize()
        logger.info("RAG service ready")
    except DocRAGException as e:
        # Initialization is retried lazily on the first request
        logger.warning(f"RAG service initialization deferred: {e}")

    yield

    # Shutdown
    cache.clear()
    logger.info("Service cache cleared")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Application settings (environment-derived when None)

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Document RAG API",
        description="Document indexing and retrieval-augmented question answering",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (correlation id must wrap request logging)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(query_router, prefix="/api/v1")
    app.include_router(collections_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    server_settings = get_settings()
    uvicorn.run(
        "docrag.api.main:app",
        host=server_settings.api_host,
        port=server_settings.api_port,
    )
