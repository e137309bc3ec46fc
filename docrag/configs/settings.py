"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from docrag.configs.base import ServiceSettings
from docrag.configs.generation import GenerationSettings
from docrag.configs.rag import RAGSettings
from docrag.configs.vector_store import VectorStoreSettings


class Settings(ServiceSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    rag: RAGSettings = Field(default_factory=RAGSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from docrag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
