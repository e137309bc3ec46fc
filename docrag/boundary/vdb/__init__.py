"""
Vector database boundary layer.

Provides vector store clients for storage and retrieval operations.
- ChromaVectorStore: Chroma server client (chroma_store)
- InMemoryVectorStore: process-local store for development and tests (memory_store)

Dependencies: chromadb
System role: Vector store adapter for RAG retrieval
"""

from docrag.boundary.vdb.base import VectorStore
from docrag.boundary.vdb.vector_schemas import CollectionStats, VectorQueryResult

__all__ = [
    "VectorStore",
    "VectorQueryResult",
    "CollectionStats",
]
