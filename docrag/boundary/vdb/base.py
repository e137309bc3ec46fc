"""
Vector store interface.

Capability interface for collection-partitioned vector storage. Retrieval
logic talks only to this interface so Chroma and the in-memory store are
interchangeable.

Dependencies: abc (stdlib), docrag.boundary.vdb.vector_schemas
System role: Swappable vector store contract
"""

from abc import ABC, abstractmethod
from typing import Any

from docrag.boundary.vdb.vector_schemas import CollectionStats, VectorQueryResult


class VectorStore(ABC):
    """Abstract base class for vector stores."""

    #: Distance space returned by query(); drives the distance-to-similarity conversion.
    distance_metric: str = "cosine"

    async def initialize(self) -> None:
        """Connect to the store. Default: nothing to do."""

    @abstractmethod
    async def heartbeat(self) -> bool:
        """Return True when the store is reachable."""

    @abstractmethod
    async def ensure_collection(self, name: str) -> None:
        """Create the collection when it does not exist yet."""

    @abstractmethod
    async def upsert(
        self,
        collection: str,
        ids: list[str],
        vectors: list[list[float]],
        documents: list[str],
        metadatas: list[dict[str, Any]],
    ) -> None:
        """Insert or replace rows; creates the collection lazily."""

    @abstractmethod
    async def query(self, collection: str, vector: list[float], top_k: int) -> VectorQueryResult:
        """
        Return up to top_k nearest rows ordered by ascending distance.

        A missing or empty collection yields an empty result.
        """

    @abstractmethod
    async def get_rows(self, collection: str) -> tuple[list[str], list[dict[str, Any]]]:
        """Return (ids, metadatas) of every row in the collection."""

    @abstractmethod
    async def delete(self, collection: str, ids: list[str]) -> None:
        """Delete rows by id."""

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Drop a collection and all of its rows. Missing collections are ignored."""

    @abstractmethod
    async def has_collection(self, name: str) -> bool:
        """Return True when the collection exists."""

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """Return collection names."""

    @abstractmethod
    async def stats(self, collection: str) -> CollectionStats:
        """Return the row count of a collection."""
