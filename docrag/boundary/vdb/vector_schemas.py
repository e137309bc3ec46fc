"""
Vector database schemas.

Pydantic models for vector operations (query results, collection stats).
Used for type-safe vector store interactions.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class VectorQueryResult(BaseModel):
    """
    Nearest-neighbour query result in the store's native order.

    The four lists are parallel: entry i of each describes the same row.
    Distances are in the store's metric (see VectorStore.distance_metric).
    """

    ids: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)
    metadatas: list[dict[str, Any]] = Field(default_factory=list)
    distances: list[float] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.ids)


class CollectionStats(BaseModel):
    """Row count of one collection."""

    name: str
    count: int = Field(ge=0)
