"""
Retrieval logic with tiered threshold fallback.

Queries the vector store with an oversampled candidate count, converts
distances to similarity scores, filters by a threshold and ranks. When a
tier yields nothing the next, more permissive tier is tried.

Dependencies: docrag.boundary.vdb, docrag.core.exceptions
System role: RAG retrieval business logic
"""

import logging
from enum import Enum
from typing import NamedTuple

from docrag.boundary.vdb.base import VectorStore
from docrag.core.exceptions import RetrievalError
from docrag.models.chunk import ChunkMetadata
from docrag.models.query import SearchResult

logger = logging.getLogger(__name__)

SINGLE_SHOT_THRESHOLD_CAP = 0.2
FALLBACK_THRESHOLD = 0.1


class RetrievalMode(str, Enum):
    """Which fallback schedule a search follows."""

    SINGLE_SHOT = "single_shot"
    STREAMING = "streaming"


class RetrievalTier(NamedTuple):
    """One search attempt: minimum score and candidate oversampling factor."""

    threshold: float
    oversample: int


def build_tiers(
    mode: RetrievalMode,
    requested_threshold: float | None,
    default_threshold: float,
) -> list[RetrievalTier]:
    """
    Build the ordered fallback schedule for a search.

    Single-shot answers start at the requested or default threshold capped
    at 0.2 and fall back to 0.1. Streaming answers start permissive and end
    with an unconditional tier so something is shown whenever the
    collection has rows.

    Args:
        mode: Single-shot or streaming schedule
        requested_threshold: Caller's threshold, if any
        default_threshold: Configured similarity threshold

    Returns:
        list[RetrievalTier]: Tiers in the order they are tried
    """
    if mode is RetrievalMode.STREAMING:
        # 0.0 counts as unset
        first = requested_threshold or FALLBACK_THRESHOLD
        return [
            RetrievalTier(first, 5),
            RetrievalTier(0.05, 10),
            RetrievalTier(0.0, 1),
        ]

    candidates = [default_threshold, SINGLE_SHOT_THRESHOLD_CAP]
    if requested_threshold is not None:
        candidates.append(requested_threshold)
    return [
        RetrievalTier(min(candidates), 2),
        RetrievalTier(FALLBACK_THRESHOLD, 1),
    ]


def similarity_from_distance(distance: float, metric: str) -> float:
    """
    Convert a store distance into a similarity score (higher is better).

    Vectors are unit length, so cosine and inner-product distances map to
    1 - d and squared L2 distance maps to 1 - d / 2.

    Raises:
        RetrievalError: For a distance metric with no known conversion
    """
    if metric in ("cosine", "ip"):
        return 1.0 - distance
    if metric == "l2":
        return 1.0 - distance / 2.0
    raise RetrievalError(f"Unsupported distance metric: {metric}", details={"metric": metric})


class Retriever:
    """Tiered similarity search over one vector store."""

    def __init__(self, vector_store: VectorStore, default_threshold: float = 0.3) -> None:
        """
        Initialize retriever.

        Args:
            vector_store: Store to query
            default_threshold: Configured similarity threshold
        """
        self._vector_store = vector_store
        self._default_threshold = default_threshold

    async def search(
        self,
        collection: str,
        query_vector: list[float],
        limit: int,
        requested_threshold: float | None = None,
        mode: RetrievalMode = RetrievalMode.SINGLE_SHOT,
    ) -> list[SearchResult]:
        """
        Return up to `limit` results ranked by descending score.

        Args:
            collection: Collection to search
            query_vector: Unit-length query vector
            limit: Maximum results
            requested_threshold: Caller's minimum score, if any
            mode: Fallback schedule to follow

        Returns:
            list[SearchResult]: Results of the first non-empty tier, or []

        Raises:
            RetrievalError: When the vector store fails
        """
        if limit <= 0:
            return []

        tiers = build_tiers(mode, requested_threshold, self._default_threshold)
        for tier_number, tier in enumerate(tiers, start=1):
            results = await self._search_tier(collection, query_vector, limit, tier)
            logger.info(
                f"{__name__}:search - Tier {tier_number}/{len(tiers)} "
                f"(threshold={tier.threshold}, oversample={tier.oversample}) "
                f"collection={collection} results={len(results)}"
            )
            if results:
                return results

        logger.info(f"{__name__}:search - No results in collection={collection} after {len(tiers)} tiers")
        return []

    async def _search_tier(
        self,
        collection: str,
        query_vector: list[float],
        limit: int,
        tier: RetrievalTier,
    ) -> list[SearchResult]:
        try:
            raw = await self._vector_store.query(collection, query_vector, limit * tier.oversample)
        except RetrievalError:
            raise
        except Exception as e:
            logger.error(f"{__name__}:_search_tier - FAILED: {type(e).__name__}: {e}")
            raise RetrievalError(f"Vector search failed: {e}", collection=collection) from e

        metric = self._vector_store.distance_metric
        results: list[SearchResult] = []
        for document, metadata, distance in zip(raw.documents, raw.metadatas, raw.distances):
            score = similarity_from_distance(distance, metric)
            if score < tier.threshold:
                continue
            results.append(
                SearchResult(
                    content=document,
                    score=score,
                    metadata=ChunkMetadata.from_store_metadata(metadata),
                )
            )

        # sorted() is stable: equal scores keep store order
        results = sorted(results, key=lambda result: result.score, reverse=True)
        return results[:limit]
