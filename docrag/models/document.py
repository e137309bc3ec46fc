"""
Document and collection models.

Describes indexing outcomes and collection listings.

Dependencies: pydantic
System role: Indexing and collection data structures
"""

from pydantic import BaseModel, Field


class IndexResult(BaseModel):
    """Result of indexing one document."""

    document_id: str = Field(description="Generated document identifier")
    chunk_count: int = Field(ge=0, description="Number of chunks stored")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")


class DocumentInfo(BaseModel):
    """Document summary grouped from the chunks of a collection."""

    id: str
    file_name: str
    title: str | None = None
    chunk_count: int = 0
    file_size: int | None = None
    document_type: str | None = None


class CollectionInfo(BaseModel):
    """Collection summary."""

    name: str
    document_count: int = 0
    chunk_count: int = 0
    documents: list[DocumentInfo] | None = None


class IndexTextRequest(BaseModel):
    """HTTP payload for indexing raw text into a collection."""

    text: str = Field(description="Document text")
    metadata: dict | None = Field(default=None, description="Extra chunk metadata")


class DeleteDocumentsRequest(BaseModel):
    """HTTP payload for deleting documents from a collection."""

    document_ids: list[str] = Field(min_length=1, description="Document ids to delete")
