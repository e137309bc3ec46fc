"""
Query request/response models.

Defines the RAG query contract shared by the orchestrator, the service
facade and the HTTP API.

Dependencies: pydantic
System role: Query data structures
"""

from pydantic import BaseModel, Field

from docrag.models.chunk import ChunkMetadata


class SearchResult(BaseModel):
    """Single ranked retrieval result. Produced fresh per query."""

    content: str = Field(description="Chunk text content")
    score: float = Field(description="Similarity score (higher is better)")
    metadata: ChunkMetadata = Field(description="Chunk metadata")


class QueryRequest(BaseModel):
    """RAG query parameters."""

    question: str = Field(description="Natural-language question")
    collection: str = Field(min_length=1, description="Collection to search")
    limit: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Maximum number of sources (defaults to configured max results)",
    )
    threshold: float | None = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Requested minimum similarity score (0.0-1.0)",
    )


class QueryResponse(BaseModel):
    """RAG query answer with the sources it was grounded on."""

    answer: str = Field(description="Generated answer or the canonical no-results message")
    sources: list[SearchResult] = Field(default_factory=list, description="Ranked sources")
    processing_time_ms: float = Field(description="Total elapsed time in milliseconds")
