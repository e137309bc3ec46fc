"""
Document text sources.

Extracts raw text from source files before chunking. Only plain-text files
are handled here; other formats plug in through the DocumentTextSource
interface.

Dependencies: pathlib (stdlib), fastapi.concurrency
System role: Text extraction boundary for indexing
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from docrag.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class DocumentTextSource(ABC):
    """Abstract text extractor."""

    #: Value stored as `document_type` on the chunks of extracted files
    document_type: str = "unknown"

    @abstractmethod
    def supports(self, path: Path) -> bool:
        """Return True when this source can extract the file."""

    @abstractmethod
    async def extract_text(self, path: Path) -> str:
        """
        Return the file's text.

        Raises:
            ValidationError: When the file is missing, too large or unsupported
        """


class PlainTextSource(DocumentTextSource):
    """UTF-8 text file reader with a size ceiling."""

    document_type = "txt"
    extensions = (".txt", ".md")

    def __init__(self, max_file_size_mb: int = 50) -> None:
        self._max_bytes = max_file_size_mb * 1024 * 1024

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def _read(self, path: Path) -> str:
        if not path.is_file():
            raise ValidationError(f"File not found: {path}", field="path")
        size = path.stat().st_size
        if size > self._max_bytes:
            raise ValidationError(
                f"File too large: {size} bytes (max {self._max_bytes})",
                field="path",
                details={"file_size": size},
            )
        if not self.supports(path):
            raise ValidationError(f"Unsupported file type: {path.suffix}", field="path")
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"File is not valid UTF-8 text: {path.name}", field="path") from e

    async def extract_text(self, path: Path) -> str:
        text = await run_in_threadpool(self._read, path)
        logger.info(f"{__name__}:extract_text - Read {len(text)} chars from {path.name}")
        return text
