"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from docrag.configs.generation import GenerationSettings
from docrag.configs.rag import RAGSettings
from docrag.configs.settings import Settings, get_settings
from docrag.configs.vector_store import VectorStoreSettings

__all__ = [
    "Settings",
    "get_settings",
    "RAGSettings",
    "VectorStoreSettings",
    "GenerationSettings",
]
