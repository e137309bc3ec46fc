"""
Local sentence-transformers embedding backend.

Runs a multilingual MiniLM model on the local machine. Model loading and
encoding are blocking, so both run in the threadpool.

Dependencies: sentence_transformers, fastapi.concurrency
System role: Default embedding backend
"""

import logging

from fastapi.concurrency import run_in_threadpool

from docrag.boundary.embeddings.base import EmbeddingBackend
from docrag.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class SentenceTransformerBackend(EmbeddingBackend):
    """sentence-transformers model wrapper."""

    def __init__(
        self,
        model_name: str = "sentence-transformers/paraphrase-multilingual-MiniLM-L12-v2",
        device: str | None = None,
    ) -> None:
        """
        Initialize backend without loading the model.

        Args:
            model_name: Hugging Face model id
            device: Optional torch device ("cpu", "cuda")
        """
        self._model_name = model_name
        self._device = device
        self._model = None

    @property
    def name(self) -> str:
        return self._model_name

    async def load(self) -> None:
        """Load the model from the local cache or the hub."""
        logger.info(f"{__name__}:load - Loading embedding model {self._model_name}")
        self._model = await run_in_threadpool(self._create_model)
        logger.info(f"{__name__}:load - Embedding model ready")

    def _create_model(self):
        from sentence_transformers import SentenceTransformer

        return SentenceTransformer(self._model_name, device=self._device)

    async def embed(self, texts: list[str]) -> list[list[float]]:
        if self._model is None:
            raise EmbeddingError(
                "Embedding model not initialized",
                details={"model": self._model_name},
            )
        vectors = await run_in_threadpool(
            self._model.encode,
            texts,
            batch_size=32,
            show_progress_bar=False,
            convert_to_numpy=True,
            normalize_embeddings=True,
        )
        return [vector.tolist() for vector in vectors]
