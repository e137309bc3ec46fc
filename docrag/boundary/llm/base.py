"""
Generation backend interface.

Capability interface for answer generation. Messages are LangChain
messages as produced by ChatPromptTemplate.to_messages().

Dependencies: abc (stdlib), langchain_core.messages
System role: Swappable generation backend contract
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from langchain_core.messages import BaseMessage


class GenerationBackend(ABC):
    """Abstract base class for generation backends."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the backend answers."""

    @abstractmethod
    async def generate(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> str:
        """
        Generate a complete answer.

        Raises:
            GenerationError: When the backend is unreachable or fails
        """

    @abstractmethod
    def generate_stream(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream answer fragments in generation order.

        Raises:
            GenerationError: When the backend is unreachable or fails mid-stream
        """
