"""
Embedding backend interface.

Capability interface for anything that turns text into vectors.
Implementations load their model in `load()` and embed batches in `embed()`.

Dependencies: abc (stdlib)
System role: Swappable embedding backend contract
"""

from abc import ABC, abstractmethod


class EmbeddingBackend(ABC):
    """Abstract base class for embedding backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Model identifier for logging and health reporting."""

    @abstractmethod
    async def load(self) -> None:
        """Load the model. Called once by EmbeddingService.initialize()."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Embed texts.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per input text, same order
        """
