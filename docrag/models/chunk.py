"""
Chunk domain model.

Represents a bounded slice of a document's text with positional metadata.
Chunks are immutable once produced by the indexing pipeline.

Dependencies: pydantic
System role: Document chunk data structure
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CHUNK_ID_SEPARATOR = "_chunk_"


def make_chunk_id(document_id: str, chunk_index: int) -> str:
    """Build the chunk id used to group chunks back into documents."""
    return f"{document_id}{CHUNK_ID_SEPARATOR}{chunk_index}"


def document_id_from_chunk_id(chunk_id: str) -> str:
    """Recover the owning document id; ids without the separator map to themselves."""
    head, separator, _ = chunk_id.partition(CHUNK_ID_SEPARATOR)
    return head if separator and head else chunk_id


class ChunkMetadata(BaseModel):
    """
    Positional and provenance metadata attached to every chunk.

    Caller-supplied metadata keys are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    source: str = Field(default="", description="Source document name")
    page: int | None = Field(default=None, description="Page number in source document")
    chunk_index: int = Field(default=0, ge=0, description="Position of the chunk in its document")
    total_chunks: int = Field(default=0, ge=0, description="Number of chunks in the document")
    document_type: str | None = Field(default=None, description="Document type (pdf, txt)")
    title: str | None = Field(default=None, description="Document title")
    file_size: int | None = Field(default=None, description="Source file size in bytes")
    file_name: str | None = Field(default=None, description="Original file name")

    def to_store_metadata(self) -> dict[str, Any]:
        """
        Flatten metadata for vector store persistence.

        Vector stores reject None values, so optional fields get neutral
        defaults. Extra keys are kept only when they hold scalar values.

        Returns:
            dict[str, Any]: Scalar-only metadata mapping
        """
        flat: dict[str, Any] = {
            "source": self.source,
            "page": self.page or 0,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
            "document_type": self.document_type or "unknown",
            "title": self.title or "",
            "file_size": self.file_size or 0,
            "file_name": self.file_name or "",
        }
        for key, value in (self.model_extra or {}).items():
            if isinstance(value, (str, int, float, bool)):
                flat[key] = value
        return flat

    @classmethod
    def from_store_metadata(cls, raw: dict[str, Any] | None) -> "ChunkMetadata":
        """Rebuild metadata from a vector store row, tolerating missing keys."""
        raw = dict(raw or {})
        return cls(
            **{
                **raw,
                "source": raw.get("source") or "",
                "page": raw.get("page") or 0,
                "chunk_index": raw.get("chunk_index") or 0,
                "total_chunks": raw.get("total_chunks") or 0,
                "document_type": raw.get("document_type") or None,
                "title": raw.get("title") or None,
                "file_size": raw.get("file_size") or None,
                "file_name": raw.get("file_name") or None,
            }
        )


class Chunk(BaseModel):
    """Document chunk model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Chunk identifier ({document_id}_chunk_{index})")
    content: str = Field(min_length=1, description="Chunk text content")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata, description="Chunk metadata")
