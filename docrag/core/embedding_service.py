"""
Embedding service with caching.

Turns text into unit-length vectors. Owns the text-to-vector cache and the
one-time load of the embedding backend.

- initialize() is single-flight: concurrent callers await one load.
- embed_batch() checks the cache per item and forwards uncached texts to the
  backend in batches; sub-requests inside a batch run concurrently and the
  next batch starts only after the current one completes.
- No partial vectors: any backend failure raises EmbeddingError.

Dependencies: asyncio, docrag.boundary.embeddings, docrag.core.embedding_cache
System role: Embedding generation for indexing and querying
"""

import asyncio
import logging
import math
import time

from docrag.boundary.embeddings.base import EmbeddingBackend
from docrag.core.embedding_cache import EmbeddingCache
from docrag.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


def normalize(vector: list[float]) -> list[float]:
    """Scale a vector to unit length; zero vectors are returned unchanged."""
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0.0:
        return list(vector)
    return [value / norm for value in vector]


class EmbeddingService:
    """Cached, batched access to an embedding backend."""

    def __init__(
        self,
        backend: EmbeddingBackend,
        cache: EmbeddingCache | None = None,
        batch_size: int = 50,
        concurrency: int = 4,
    ) -> None:
        """
        Initialize embedding service.

        Args:
            backend: Embedding backend to load and call
            cache: Injectable cache (a default bounded cache when None)
            batch_size: Uncached texts per backend batch
            concurrency: Concurrent backend sub-requests within one batch
        """
        if batch_size <= 0 or concurrency <= 0:
            raise ValueError("batch_size and concurrency must be positive")
        self._backend = backend
        self._cache = cache if cache is not None else EmbeddingCache()
        self._batch_size = batch_size
        self._concurrency = concurrency
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def cache(self) -> EmbeddingCache:
        return self._cache

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Load the embedding backend exactly once.

        Raises:
            EmbeddingError: When the backend fails to load
        """
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            logger.info(f"{__name__}:initialize - Initializing embedding model: {self._backend.name}")
            try:
                await self._backend.load()
            except EmbeddingError:
                raise
            except Exception as e:
                logger.error(f"{__name__}:initialize - FAILED: {type(e).__name__}: {e}")
                raise EmbeddingError(
                    f"Embedding model initialization failed: {e}",
                    details={"model": self._backend.name},
                ) from e
            self._initialized = True
            logger.info(f"{__name__}:initialize - Embedding model initialized successfully")

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed texts, reusing cached vectors.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One unit-length vector per input text, same order

        Raises:
            EmbeddingError: When the backend is unavailable or inference fails
        """
        if not texts:
            return []
        await self.initialize()

        start_time = time.perf_counter()
        resolved: dict[str, list[float]] = {}
        pending: list[str] = []
        seen: set[str] = set()
        for text in texts:
            if text in seen:
                continue
            seen.add(text)
            cached = self._cache.get(text)
            if cached is not None:
                resolved[text] = cached
            else:
                pending.append(text)

        for batch_start in range(0, len(pending), self._batch_size):
            batch = pending[batch_start:batch_start + self._batch_size]
            vectors = await self._embed_uncached(batch)
            for text, vector in zip(batch, vectors):
                self._cache.put(text, vector)
                resolved[text] = vector
            processed = batch_start + len(batch)
            if processed % 100 == 0:
                logger.info(f"{__name__}:embed_batch - Processed {processed}/{len(pending)} embeddings")

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:embed_batch - Embedded {len(texts)} texts "
            f"({len(pending)} computed, {len(texts) - len(pending)} cached) in {elapsed_ms:.0f}ms"
        )
        return [list(resolved[text]) for text in texts]

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a single query string through the same cache path.

        Args:
            text: Query text

        Returns:
            list[float]: Unit-length query vector
        """
        return (await self.embed_batch([text]))[0]

    def clear_cache(self) -> None:
        """Empty the cache. Initialization state is kept."""
        self._cache.clear()

    def model_info(self) -> dict[str, object]:
        """Return model name, initialization state and cache size."""
        return {
            "name": self._backend.name,
            "initialized": self._initialized,
            "cache_size": len(self._cache),
        }

    async def _embed_uncached(self, batch: list[str]) -> list[list[float]]:
        """Run one batch as concurrent sub-requests and validate the output."""
        slice_size = max(1, math.ceil(len(batch) / self._concurrency))
        slices = [batch[i:i + slice_size] for i in range(0, len(batch), slice_size)]
        try:
            results = await asyncio.gather(*(self._backend.embed(part) for part in slices))
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(f"{__name__}:_embed_uncached - FAILED: {type(e).__name__}: {e}")
            raise EmbeddingError(
                f"Failed to generate embeddings: {e}",
                details={"model": self._backend.name, "batch_size": len(batch)},
            ) from e

        vectors: list[list[float]] = []
        for part, part_vectors in zip(slices, results):
            if len(part_vectors) != len(part):
                raise EmbeddingError(
                    "Embedding backend returned a wrong number of vectors",
                    details={"expected": len(part), "received": len(part_vectors)},
                )
            vectors.extend(part_vectors)

        normalized: list[list[float]] = []
        for vector in vectors:
            values = [float(value) for value in vector]
            if not values or not all(math.isfinite(value) for value in values):
                raise EmbeddingError(
                    "Embedding backend returned an empty or non-finite vector",
                    details={"model": self._backend.name},
                )
            normalized.append(normalize(values))

        dimensions = {len(vector) for vector in normalized}
        if len(dimensions) > 1:
            raise EmbeddingError(
                "Embedding backend returned vectors of differing dimensions",
                details={"model": self._backend.name, "dimensions": sorted(dimensions)},
            )
        return normalized
