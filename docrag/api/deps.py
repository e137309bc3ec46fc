"""
Dependency injection container.

Caches the RAG service for the application's lifetime and exposes it as a
FastAPI dependency.

Dependencies: docrag.configs, docrag.application
System role: DI container for service injection
"""

from docrag.application.rag_service import RAGService
from docrag.configs import Settings, get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._rag_service: RAGService | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def rag_service(self) -> RAGService:
        """Get cached RAG service."""
        if self._rag_service is None:
            self._rag_service = RAGService.from_settings(self.settings)
        return self._rag_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._rag_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_rag_service() -> RAGService:
    """FastAPI dependency returning the shared RAG service."""
    return _service_cache.rag_service
