"""
Personality provider.

Supplies the system instruction used for answer generation. The file-backed
provider re-reads its file on every call so edits apply without a restart.

Dependencies: pathlib (stdlib), fastapi.concurrency
System role: Hot-reloadable system prompt source
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

DEFAULT_RAG_PERSONALITY = """You are an AI assistant that answers questions based on the provided documents.
Use only the information from the context to answer. If you cannot find the answer in the context, say that you don't have enough information.
Cite sources when possible (e.g., [Source, Page X])."""


class PersonalityProvider(ABC):
    """Abstract source of the generation system prompt."""

    @abstractmethod
    async def system_prompt(self) -> str:
        """Return the current system instruction."""


class StaticPersonalityProvider(PersonalityProvider):
    """Fixed system prompt."""

    def __init__(self, prompt: str = DEFAULT_RAG_PERSONALITY) -> None:
        self._prompt = prompt

    async def system_prompt(self) -> str:
        return self._prompt


class FilePersonalityProvider(PersonalityProvider):
    """System prompt read from a text file, falling back to a built-in default."""

    def __init__(self, path: str | Path, default: str = DEFAULT_RAG_PERSONALITY) -> None:
        """
        Initialize provider.

        Args:
            path: Personality file location
            default: Prompt used when the file is missing, unreadable or blank
        """
        self._path = Path(path)
        self._default = default

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> str:
        try:
            content = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return self._default
        except OSError as e:
            logger.warning(f"{__name__}:system_prompt - Failed to read {self._path}: {e}")
            return self._default
        return content or self._default

    async def system_prompt(self) -> str:
        return await run_in_threadpool(self._read)

    async def save(self, prompt: str) -> None:
        """Persist a new system prompt; the next call picks it up."""
        await run_in_threadpool(self._path.write_text, prompt, encoding="utf-8")
        logger.info(f"{__name__}:save - Personality updated at {self._path}")
