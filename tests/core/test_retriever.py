"""
Test suite for tiered similarity retrieval.

Tests tier schedules, distance conversion, ranking, truncation and the
threshold fallback path.

Dependencies: pytest, unittest.mock
System role: Verification of retrieval business logic
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from docrag.boundary.vdb.vector_schemas import VectorQueryResult
from docrag.core.exceptions import RetrievalError, VectorStoreError
from docrag.core.retriever import (
    RetrievalMode,
    RetrievalTier,
    Retriever,
    build_tiers,
    similarity_from_distance,
)


def make_store(*results: VectorQueryResult, metric: str = "cosine") -> MagicMock:
    """Mock store answering successive queries with the given results."""
    store = MagicMock()
    store.distance_metric = metric
    store.query = AsyncMock(side_effect=list(results))
    return store


def rows(*items: tuple[str, float]) -> VectorQueryResult:
    """Build a query result from (content, distance) pairs."""
    return VectorQueryResult(
        ids=[f"doc_chunk_{i}" for i in range(len(items))],
        documents=[content for content, _ in items],
        metadatas=[{"source": f"{content}.txt", "page": 1, "chunk_index": i} for i, (content, _) in enumerate(items)],
        distances=[distance for _, distance in items],
    )


# ============================================================================
# Tier schedules
# ============================================================================


class TestBuildTiers:
    """Test build_tiers."""

    def test_single_shot_caps_first_tier_at_point_two(self) -> None:
        """Should use min(requested, default, 0.2) then 0.1."""
        tiers = build_tiers(RetrievalMode.SINGLE_SHOT, 0.3, 0.3)

        assert tiers == [RetrievalTier(0.2, 2), RetrievalTier(0.1, 1)]

    def test_single_shot_honours_lower_requested_threshold(self) -> None:
        """Should keep a requested threshold below the cap."""
        assert build_tiers(RetrievalMode.SINGLE_SHOT, 0.05, 0.3)[0] == RetrievalTier(0.05, 2)

    def test_single_shot_without_request_uses_default(self) -> None:
        """Should fall back to the configured default when none is requested."""
        assert build_tiers(RetrievalMode.SINGLE_SHOT, None, 0.15)[0] == RetrievalTier(0.15, 2)

    def test_streaming_schedule(self) -> None:
        """Should start at the requested threshold and end unfiltered."""
        assert build_tiers(RetrievalMode.STREAMING, 0.4, 0.3) == [
            RetrievalTier(0.4, 5),
            RetrievalTier(0.05, 10),
            RetrievalTier(0.0, 1),
        ]

    def test_streaming_default_first_threshold(self) -> None:
        """Should use 0.1 when no threshold is requested."""
        assert build_tiers(RetrievalMode.STREAMING, None, 0.3)[0] == RetrievalTier(0.1, 5)

    def test_streaming_zero_threshold_falls_back_to_default_first_tier(self) -> None:
        """Should treat a requested 0.0 like no request so later tiers stay more permissive."""
        assert build_tiers(RetrievalMode.STREAMING, 0.0, 0.3) == [
            RetrievalTier(0.1, 5),
            RetrievalTier(0.05, 10),
            RetrievalTier(0.0, 1),
        ]


class TestSimilarityFromDistance:
    """Test distance to similarity conversion."""

    @pytest.mark.parametrize(
        ("distance", "metric", "expected"),
        [(0.0, "cosine", 1.0), (0.25, "cosine", 0.75), (0.4, "ip", 0.6), (0.5, "l2", 0.75), (2.0, "l2", 0.0)],
    )
    def test_known_metrics(self, distance: float, metric: str, expected: float) -> None:
        """Should convert cosine, inner product and squared L2 distances."""
        assert similarity_from_distance(distance, metric) == pytest.approx(expected)

    def test_unknown_metric_raises(self) -> None:
        """Should refuse to guess for an unknown metric."""
        with pytest.raises(RetrievalError):
            similarity_from_distance(0.1, "manhattan")


# ============================================================================
# Search
# ============================================================================


class TestRetrieverSearch:
    """Test Retriever.search."""

    @pytest.mark.asyncio
    async def test_results_sorted_and_truncated(self) -> None:
        """Should sort by score descending and return at most limit results."""
        store = make_store(rows(("c", 0.3), ("a", 0.05), ("d", 0.5), ("b", 0.1)))
        retriever = Retriever(store, default_threshold=0.3)

        results = await retriever.search("docs", [1.0], limit=2)

        assert [result.content for result in results] == ["a", "b"]
        assert [result.score for result in results] == pytest.approx([0.95, 0.9])
        store.query.assert_awaited_once_with("docs", [1.0], 4)

    @pytest.mark.asyncio
    async def test_tier_fallback_surfaces_low_score_hit(self) -> None:
        """Should find a 0.15 hit through the 0.1 tier when 0.3 is requested."""
        store = make_store(rows(("weak", 0.85)), rows(("weak", 0.85)))
        retriever = Retriever(store, default_threshold=0.3)

        results = await retriever.search("docs", [1.0], limit=5, requested_threshold=0.3)

        assert [result.content for result in results] == ["weak"]
        assert results[0].score == pytest.approx(0.15)
        assert [call.args[2] for call in store.query.await_args_list] == [10, 5]

    @pytest.mark.asyncio
    async def test_first_non_empty_tier_wins(self) -> None:
        """Should not query later tiers once a tier has results."""
        store = make_store(rows(("strong", 0.1)))
        retriever = Retriever(store)

        results = await retriever.search("docs", [1.0], limit=3)

        assert len(results) == 1
        assert store.query.await_count == 1

    @pytest.mark.asyncio
    async def test_all_tiers_empty_returns_empty(self) -> None:
        """Should return [] after exhausting every tier."""
        store = make_store(rows(("far", 1.5)), rows(("far", 1.5)), rows(("far", 1.5)))
        retriever = Retriever(store)

        results = await retriever.search("docs", [1.0], limit=3, mode=RetrievalMode.STREAMING)

        assert results == []
        assert [call.args[2] for call in store.query.await_args_list] == [15, 30, 3]

    @pytest.mark.asyncio
    async def test_streaming_last_tier_keeps_zero_score(self) -> None:
        """Should surface orthogonal matches in the unfiltered streaming tier."""
        store = make_store(rows(("orthogonal", 1.0)), rows(("orthogonal", 1.0)), rows(("orthogonal", 1.0)))
        retriever = Retriever(store)

        results = await retriever.search("docs", [1.0], limit=3, mode=RetrievalMode.STREAMING)

        assert [result.content for result in results] == ["orthogonal"]
        assert results[0].score == 0.0

    @pytest.mark.asyncio
    async def test_ties_keep_store_order(self) -> None:
        """Should break score ties by the store's return order."""
        store = make_store(rows(("first", 0.2), ("second", 0.2), ("third", 0.2)))
        retriever = Retriever(store)

        results = await retriever.search("docs", [1.0], limit=3)

        assert [result.content for result in results] == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_metadata_is_rebuilt(self) -> None:
        """Should expose chunk metadata on each result."""
        store = make_store(rows(("a", 0.0)))
        results = await Retriever(store).search("docs", [1.0], limit=1)

        assert results[0].metadata.source == "a.txt"
        assert results[0].metadata.page == 1

    @pytest.mark.asyncio
    async def test_missing_collection_yields_empty(self) -> None:
        """Should treat an empty store response as no results."""
        store = make_store(VectorQueryResult(), VectorQueryResult())
        assert await Retriever(store).search("missing", [1.0], limit=5) == []

    @pytest.mark.asyncio
    async def test_store_failure_raises_retrieval_error(self) -> None:
        """Should surface vector store failures as RetrievalError."""
        store = MagicMock()
        store.distance_metric = "cosine"
        store.query = AsyncMock(side_effect=ConnectionError("refused"))

        with pytest.raises(RetrievalError):
            await Retriever(store).search("docs", [1.0], limit=5)

    @pytest.mark.asyncio
    async def test_vector_store_error_passes_through(self) -> None:
        """Should not re-wrap errors that are already retrieval errors."""
        store = MagicMock()
        store.distance_metric = "cosine"
        store.query = AsyncMock(side_effect=VectorStoreError("down", operation="query"))

        with pytest.raises(VectorStoreError):
            await Retriever(store).search("docs", [1.0], limit=5)

    @pytest.mark.asyncio
    async def test_l2_store_scores(self) -> None:
        """Should use the store's metric for scoring."""
        store = make_store(rows(("a", 0.2)), metric="l2")
        results = await Retriever(store).search("docs", [1.0], limit=1)

        assert results[0].score == pytest.approx(0.9)
