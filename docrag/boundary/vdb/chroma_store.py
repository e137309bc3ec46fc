"""
Chroma vector store client.

Talks to a Chroma server over HTTP. Collection handles are kept in a
read-through cache: a miss resolves the handle from the server once, and
the entry is replaced on create and dropped on delete. No other code path
refreshes it.

Chroma's Python client is blocking, so every call runs in the threadpool.

Dependencies: chromadb, fastapi.concurrency, docrag.boundary.vdb.base
System role: Production vector store adapter
"""

import logging
from typing import Any

from fastapi.concurrency import run_in_threadpool

from docrag.boundary.vdb.base import VectorStore
from docrag.boundary.vdb.vector_schemas import CollectionStats, VectorQueryResult
from docrag.core.exceptions import CollectionNotFoundError, VectorStoreError

logger = logging.getLogger(__name__)


class ChromaVectorStore(VectorStore):
    """
    Chroma HTTP client wrapper.

    New collections are created in the configured distance space, so
    query distances match `distance_metric`.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8000,
        ssl: bool = False,
        distance_metric: str = "cosine",
        client: Any | None = None,
    ) -> None:
        """
        Initialize store without connecting.

        Args:
            host: Chroma server host
            port: Chroma server port
            ssl: Use HTTPS
            distance_metric: hnsw space for new collections (cosine, ip, l2)
            client: Pre-built chromadb client (tests inject fakes here)
        """
        self._host = host
        self._port = port
        self._ssl = ssl
        self.distance_metric = distance_metric
        self._client = client
        self._collections: dict[str, Any] = {}

    async def initialize(self) -> None:
        """Create the HTTP client and verify the server answers."""
        if self._client is None:
            self._client = await self._call("connect", self._create_client)
        await self._call("heartbeat", self._client.heartbeat)
        logger.info(f"{__name__}:initialize - Connected to Chroma at {self._host}:{self._port}")

    def _create_client(self) -> Any:
        import chromadb

        return chromadb.HttpClient(host=self._host, port=self._port, ssl=self._ssl)

    async def _call(self, operation: str, func, *args, collection: str | None = None, **kwargs):
        """Run a blocking client call in the threadpool, wrapping failures."""
        try:
            return await run_in_threadpool(func, *args, **kwargs)
        except VectorStoreError:
            raise
        except Exception as e:
            logger.error(f"{__name__}:{operation} - FAILED: {type(e).__name__}: {e}")
            raise VectorStoreError(
                f"Chroma {operation} failed: {e}",
                operation=operation,
                collection=collection,
            ) from e

    def _require_client(self) -> Any:
        if self._client is None:
            raise VectorStoreError("Chroma client not initialized", operation="client")
        return self._client

    async def heartbeat(self) -> bool:
        try:
            await self._call("heartbeat", self._require_client().heartbeat)
            return True
        except VectorStoreError:
            return False

    async def _get_collection(self, name: str) -> Any | None:
        """Resolve a collection handle through the cache; None when it does not exist."""
        cached = self._collections.get(name)
        if cached is not None:
            return cached
        if name not in await self.list_collections():
            return None
        handle = await self._call(
            "get_collection", self._require_client().get_collection, name=name, collection=name
        )
        self._collections[name] = handle
        return handle

    async def ensure_collection(self, name: str) -> None:
        if name in self._collections:
            return
        handle = await self._call(
            "create_collection",
            self._require_client().get_or_create_collection,
            name=name,
            metadata={"hnsw:space": self.distance_metric, "description": f"Collection for {name}"},
            collection=name,
        )
        self._collections[name] = handle

    async def upsert(
        self,
        collection: str,
        ids: list[str],
        vectors: list[list[float]],
        documents: list[str],
        metadatas: list[dict[str, Any]],
    ) -> None:
        await self.ensure_collection(collection)
        handle = self._collections[collection]
        await self._call(
            "upsert",
            handle.upsert,
            ids=ids,
            embeddings=vectors,
            documents=documents,
            metadatas=metadatas,
            collection=collection,
        )
        logger.info(f"{__name__}:upsert - Added {len(ids)} documents to collection: {collection}")

    async def query(self, collection: str, vector: list[float], top_k: int) -> VectorQueryResult:
        handle = await self._get_collection(collection)
        if handle is None or top_k <= 0:
            return VectorQueryResult()

        count = await self._call("count", handle.count, collection=collection)
        if count == 0:
            return VectorQueryResult()

        raw = await self._call(
            "query",
            handle.query,
            query_embeddings=[vector],
            n_results=min(top_k, count),
            include=["documents", "metadatas", "distances"],
            collection=collection,
        )
        return self._parse_query(raw, collection)

    @staticmethod
    def _parse_query(raw: Any, collection: str) -> VectorQueryResult:
        """Unwrap Chroma's per-query nested lists into one result."""

        def first(key: str) -> list:
            value = raw.get(key) if raw else None
            return list(value[0]) if value and value[0] is not None else []

        ids = first("ids")
        documents = first("documents")
        metadatas = first("metadatas")
        distances = first("distances")
        if not (len(documents) == len(metadatas) == len(distances) == len(ids)):
            raise VectorStoreError(
                "Malformed query response from Chroma",
                operation="query",
                collection=collection,
                details={
                    "ids": len(ids),
                    "documents": len(documents),
                    "metadatas": len(metadatas),
                    "distances": len(distances),
                },
            )
        return VectorQueryResult(
            ids=ids,
            documents=[document or "" for document in documents],
            metadatas=[dict(metadata or {}) for metadata in metadatas],
            distances=[float(distance) for distance in distances],
        )

    async def get_rows(self, collection: str) -> tuple[list[str], list[dict[str, Any]]]:
        handle = await self._get_collection(collection)
        if handle is None:
            return [], []
        raw = await self._call("get", handle.get, include=["metadatas"], collection=collection)
        ids = list(raw.get("ids") or [])
        metadatas = [dict(metadata or {}) for metadata in (raw.get("metadatas") or [])]
        return ids, metadatas

    async def delete(self, collection: str, ids: list[str]) -> None:
        handle = await self._get_collection(collection)
        if handle is None:
            raise CollectionNotFoundError(collection)
        if ids:
            await self._call("delete", handle.delete, ids=ids, collection=collection)

    async def delete_collection(self, name: str) -> None:
        if name not in await self.list_collections():
            self._collections.pop(name, None)
            return
        await self._call(
            "delete_collection", self._require_client().delete_collection, name=name, collection=name
        )
        self._collections.pop(name, None)
        logger.info(f"{__name__}:delete_collection - Deleted collection: {name}")

    async def has_collection(self, name: str) -> bool:
        return name in self._collections or name in await self.list_collections()

    async def list_collections(self) -> list[str]:
        raw = await self._call("list_collections", self._require_client().list_collections)
        # chromadb 0.6 returns names; other releases return Collection objects.
        names = [item if isinstance(item, str) else item.name for item in raw]
        return [name for name in names if name and name.strip()]

    async def stats(self, collection: str) -> CollectionStats:
        handle = await self._get_collection(collection)
        if handle is None:
            raise CollectionNotFoundError(collection)
        count = await self._call("count", handle.count, collection=collection)
        return CollectionStats(name=collection, count=count)
