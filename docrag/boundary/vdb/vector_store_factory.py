"""
Vector store factory for selecting between in-memory (dev) and Chroma (prod).

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: docrag.boundary.vdb, docrag.configs
System role: Vector store instantiation and selection
"""

import logging

from docrag.boundary.vdb.base import VectorStore
from docrag.boundary.vdb.chroma_store import ChromaVectorStore
from docrag.boundary.vdb.memory_store import InMemoryVectorStore
from docrag.configs import VectorStoreSettings, get_settings

logger = logging.getLogger(__name__)


def get_vector_store(settings: VectorStoreSettings | None = None) -> VectorStore:
    """
    Factory function to get vector store based on environment configuration.

    Args:
        settings: Vector store settings (application settings when None)

    Returns:
        VectorStore: Configured vector store instance

    Raises:
        ValueError: If VECTOR_STORE_STORE_TYPE is invalid
    """
    settings = settings or get_settings().vector_store
    store_type = settings.store_type.lower()

    if store_type == "memory":
        logger.info(
            f"{__name__}:get_vector_store - Creating in-memory vector store (local dev mode)"
        )
        return InMemoryVectorStore()

    elif store_type == "chroma":
        logger.info(f"{__name__}:get_vector_store - Creating Chroma vector store (production mode)")
        return ChromaVectorStore(
            host=settings.chroma_host,
            port=settings.chroma_port,
            ssl=settings.chroma_ssl,
            distance_metric=settings.distance_metric,
        )

    else:
        raise ValueError(
            f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
            f"Must be 'memory' (dev) or 'chroma' (production)."
        )
