"""
Bounded text-to-vector cache.

LRU cache keyed by the exact text string. Shared between document-chunk
embeddings and query embeddings for the lifetime of the owning
EmbeddingService. Lookups and inserts are not mutually exclusive across
concurrent queries; a race costs a duplicate backend call, never a wrong
vector.

Dependencies: collections (stdlib)
System role: Embedding reuse across indexing and querying
"""

import logging
from collections import OrderedDict

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """LRU cache for embedding vectors."""

    def __init__(self, capacity: int | None = 10_000) -> None:
        """
        Initialize cache.

        Args:
            capacity: Maximum number of cached vectors (None for unbounded)
        """
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be positive or None")
        self.capacity = capacity
        self._entries: OrderedDict[str, tuple[float, ...]] = OrderedDict()

        # Metrics
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, text: str) -> list[float] | None:
        """Return a copy of the cached vector for text, refreshing its recency."""
        vector = self._entries.get(text)
        if vector is None:
            self.misses += 1
            return None
        self._entries.move_to_end(text)
        self.hits += 1
        return list(vector)

    def put(self, text: str, vector: list[float]) -> None:
        """Store a copy of vector, evicting the least recently used entry when full."""
        self._entries[text] = tuple(vector)
        self._entries.move_to_end(text)
        if self.capacity is not None:
            while len(self._entries) > self.capacity:
                self._entries.popitem(last=False)
                self.evictions += 1

    def clear(self) -> None:
        """Drop every cached vector."""
        self._entries.clear()
        logger.info("Embedding cache cleared")

    def stats(self) -> dict[str, int | None]:
        """Return cache metrics."""
        return {
            "size": len(self._entries),
            "capacity": self.capacity,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: object) -> bool:
        return text in self._entries
