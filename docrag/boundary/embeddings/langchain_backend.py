"""
LangChain embeddings adapter.

Wraps any `langchain_core.embeddings.Embeddings` implementation (Google,
Bedrock, HuggingFace, ...) so it can serve as an EmbeddingBackend.

Dependencies: langchain_core
System role: Embedding backend adapter for hosted providers
"""

import logging

from langchain_core.embeddings import Embeddings

from docrag.boundary.embeddings.base import EmbeddingBackend

logger = logging.getLogger(__name__)


class LangChainEmbeddingBackend(EmbeddingBackend):
    """EmbeddingBackend over a LangChain Embeddings object."""

    def __init__(self, embeddings: Embeddings, name: str | None = None) -> None:
        """
        Initialize adapter.

        Args:
            embeddings: LangChain embeddings instance
            name: Optional display name (defaults to the class name)
        """
        self._embeddings = embeddings
        self._name = name or type(embeddings).__name__

    @property
    def name(self) -> str:
        return self._name

    async def load(self) -> None:
        # Hosted providers have nothing to load; clients are built in their constructors.
        logger.info(f"{__name__}:load - Using LangChain embeddings {self._name}")

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return await self._embeddings.aembed_documents(texts)
