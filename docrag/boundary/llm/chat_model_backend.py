"""
LangChain chat model adapter.

Lets any LangChain BaseChatModel (Gemini, Bedrock, OpenAI, ...) serve as
the generation backend.

Dependencies: langchain_core
System role: Generation backend adapter for hosted providers
"""

import logging
from collections.abc import AsyncIterator

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from docrag.boundary.llm.base import GenerationBackend
from docrag.core.exceptions import GenerationError

logger = logging.getLogger(__name__)


def content_to_text(content: str | list) -> str:
    """Flatten string or content-block message content to text."""
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content)


class ChatModelBackend(GenerationBackend):
    """GenerationBackend over a LangChain chat model."""

    def __init__(self, model: BaseChatModel) -> None:
        self._model = model

    async def health_check(self) -> bool:
        # Hosted chat models expose no cheap probe; a configured model counts as healthy.
        return True

    def _bound(self, temperature: float | None):
        if temperature is None:
            return self._model
        return self._model.bind(temperature=temperature)

    async def generate(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> str:
        try:
            result = await self._bound(temperature).ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:generate - FAILED: {type(e).__name__}: {e}")
            raise GenerationError(f"Chat model invocation failed: {e}") from e
        return content_to_text(result.content)

    async def generate_stream(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        try:
            async for chunk in self._bound(temperature).astream(messages):
                token = content_to_text(chunk.content) if chunk.content else ""
                if token:
                    yield token
        except Exception as e:
            logger.error(f"{__name__}:generate_stream - FAILED: {type(e).__name__}: {e}")
            raise GenerationError(f"Chat model streaming failed: {e}") from e
