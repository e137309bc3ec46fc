"""Application services."""

from docrag.application.rag_service import RAGService

__all__ = ["RAGService"]
