"""
RAG pipeline configuration settings.

Chunking, embedding, retrieval and query-lifecycle settings.
Mirrors the RAG_* environment variables of the service.

Dependencies: pydantic, pydantic_settings
System role: Retrieval pipeline configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RAGSettings(BaseSettings):
    """Chunking, embedding and retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RAG_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_size: int = Field(default=1000, description="Maximum chunk size in characters")
    chunk_overlap: int = Field(default=200, description="Overlap between consecutive chunks")

    # Retrieval settings
    max_results: int = Field(default=5, ge=1, description="Default number of sources per answer")
    similarity_threshold: float = Field(
        default=0.3,
        description="Default minimum similarity score (0.0-1.0)",
    )

    # Embedding settings
    embedding_model: str = Field(
        default="sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2",
        description="Sentence-transformers model used for embeddings",
    )
    embedding_batch_size: int = Field(
        default=50,
        ge=1,
        description="Uncached texts forwarded to the backend per batch",
    )
    embedding_concurrency: int = Field(
        default=4,
        ge=1,
        description="Concurrent backend sub-requests within one batch",
    )
    embedding_cache_size: int | None = Field(
        default=10_000,
        description="Embedding cache capacity (None for unbounded)",
    )

    # Query lifecycle
    query_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Overall deadline for one query",
    )
    personality_file: str = Field(
        default="rag-personality.txt",
        description="File holding the system instruction for answer generation",
    )
    max_file_size_mb: int = Field(default=50, ge=1, description="Largest accepted source file")

    @model_validator(mode="after")
    def _validate_ranges(self) -> "RAGSettings":
        """Reject inconsistent chunking and threshold values."""
        if self.chunk_size <= 0:
            raise ValueError("RAG_CHUNK_SIZE must be positive")
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ValueError("RAG_CHUNK_OVERLAP must be >= 0 and less than RAG_CHUNK_SIZE")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("RAG_SIMILARITY_THRESHOLD must be between 0 and 1")
        return self
