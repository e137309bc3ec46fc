"""
Domain models.

Exports: Chunk, ChunkMetadata, SearchResult, QueryRequest, QueryResponse,
IndexResult, CollectionInfo, DocumentInfo
"""

from .chunk import Chunk, ChunkMetadata, document_id_from_chunk_id, make_chunk_id
from .document import (
    CollectionInfo,
    DeleteDocumentsRequest,
    DocumentInfo,
    IndexResult,
    IndexTextRequest,
)
from .query import QueryRequest, QueryResponse, SearchResult

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "make_chunk_id",
    "document_id_from_chunk_id",
    "SearchResult",
    "QueryRequest",
    "QueryResponse",
    "IndexResult",
    "IndexTextRequest",
    "DeleteDocumentsRequest",
    "CollectionInfo",
    "DocumentInfo",
]
