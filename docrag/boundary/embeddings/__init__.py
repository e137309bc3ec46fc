"""
Embedding backends.

- SentenceTransformerBackend: local sentence-transformers model (default)
- LangChainEmbeddingBackend: adapter for any LangChain Embeddings

Dependencies: sentence_transformers, langchain_core
System role: Embedding model adapters
"""

from docrag.boundary.embeddings.base import EmbeddingBackend
from docrag.boundary.embeddings.langchain_backend import LangChainEmbeddingBackend
from docrag.boundary.embeddings.sentence_transformer import SentenceTransformerBackend

__all__ = [
    "EmbeddingBackend",
    "LangChainEmbeddingBackend",
    "SentenceTransformerBackend",
]
