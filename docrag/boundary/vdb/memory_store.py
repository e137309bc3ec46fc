"""
In-memory vector store for development and tests.

Provides the same interface as ChromaVectorStore without a server.
Exact cosine ranking over every row; rows live for the process lifetime.

Dependencies: math (stdlib), docrag.boundary.vdb.base
System role: Development vector store (local testing only)
"""

import logging
import math
from typing import Any

from docrag.boundary.vdb.base import VectorStore
from docrag.boundary.vdb.vector_schemas import CollectionStats, VectorQueryResult
from docrag.core.exceptions import CollectionNotFoundError, VectorStoreError

logger = logging.getLogger(__name__)


def cosine_distance(a: list[float], b: list[float]) -> float:
    """Cosine distance in [0, 2]; mismatched or zero vectors count as orthogonal."""
    if not a or not b or len(a) != len(b):
        return 1.0

    dot = sum(x * y for x, y in zip(a, b))
    na = math.sqrt(sum(x * x for x in a))
    nb = math.sqrt(sum(y * y for y in b))
    if na == 0.0 or nb == 0.0:
        return 1.0

    similarity = max(min(dot / (na * nb), 1.0), -1.0)
    return 1.0 - similarity


class InMemoryVectorStore(VectorStore):
    """Process-local cosine vector store."""

    distance_metric = "cosine"

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def heartbeat(self) -> bool:
        return True

    async def ensure_collection(self, name: str) -> None:
        if name not in self._collections:
            self._collections[name] = {}
            logger.info(f"{__name__}:ensure_collection - Created collection: {name}")

    async def upsert(
        self,
        collection: str,
        ids: list[str],
        vectors: list[list[float]],
        documents: list[str],
        metadatas: list[dict[str, Any]],
    ) -> None:
        if not (len(ids) == len(vectors) == len(documents) == len(metadatas)):
            raise VectorStoreError(
                "Upsert arguments must have equal lengths",
                operation="upsert",
                collection=collection,
            )
        await self.ensure_collection(collection)
        rows = self._collections[collection]
        for row_id, vector, document, metadata in zip(ids, vectors, documents, metadatas):
            rows[row_id] = {
                "embedding": list(vector),
                "document": document,
                "metadata": dict(metadata),
            }

    async def query(self, collection: str, vector: list[float], top_k: int) -> VectorQueryResult:
        rows = self._collections.get(collection)
        if not rows or top_k <= 0:
            return VectorQueryResult()

        ranked = sorted(
            ((row_id, row, cosine_distance(vector, row["embedding"])) for row_id, row in rows.items()),
            key=lambda item: item[2],
        )[:top_k]
        return VectorQueryResult(
            ids=[row_id for row_id, _, _ in ranked],
            documents=[row["document"] for _, row, _ in ranked],
            metadatas=[dict(row["metadata"]) for _, row, _ in ranked],
            distances=[distance for _, _, distance in ranked],
        )

    async def get_rows(self, collection: str) -> tuple[list[str], list[dict[str, Any]]]:
        rows = self._collections.get(collection, {})
        return list(rows.keys()), [dict(row["metadata"]) for row in rows.values()]

    async def delete(self, collection: str, ids: list[str]) -> None:
        rows = self._collections.get(collection)
        if rows is None:
            raise CollectionNotFoundError(collection)
        for row_id in ids:
            rows.pop(row_id, None)

    async def delete_collection(self, name: str) -> None:
        self._collections.pop(name, None)

    async def has_collection(self, name: str) -> bool:
        return name in self._collections

    async def list_collections(self) -> list[str]:
        return list(self._collections.keys())

    async def stats(self, collection: str) -> CollectionStats:
        rows = self._collections.get(collection)
        if rows is None:
            raise CollectionNotFoundError(collection)
        return CollectionStats(name=collection, count=len(rows))
