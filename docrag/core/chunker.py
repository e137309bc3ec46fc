"""
Sliding-window text chunking using CharacterTextSplitter.

Splits document text into fixed-size character windows where every window
after the first repeats the last `chunk_overlap` characters of its
predecessor. Dropping that repeated prefix from each non-first chunk and
concatenating restores the input exactly.

Dependencies: langchain_text_splitters
System role: First stage of document indexing
"""

from langchain_text_splitters import CharacterTextSplitter

from docrag.core.exceptions import ValidationError


class TextChunker:
    """Split text into overlapping chunks using CharacterTextSplitter."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
    ) -> None:
        """
        Initialize chunker with window configuration.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Characters repeated from the previous chunk

        Raises:
            ValidationError: When chunk_size <= 0 or overlap is out of range
        """
        if chunk_size <= 0:
            raise ValidationError("chunk_size must be positive", field="chunk_size")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValidationError(
                "chunk_overlap must be >= 0 and less than chunk_size",
                field="chunk_overlap",
                details={"chunk_size": chunk_size, "chunk_overlap": chunk_overlap},
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        # Character-level splits with whitespace kept, so windows are exact slices
        self._splitter = CharacterTextSplitter(
            separator="",
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            strip_whitespace=False,
            length_function=len,
        )

    @property
    def step(self) -> int:
        """Distance between the starts of consecutive chunks."""
        return self.chunk_size - self.chunk_overlap

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Raw document text

        Returns:
            list[str]: Ordered non-empty chunks; empty input gives no chunks
        """
        if not text:
            return []
        return self._splitter.split_text(text)

    @staticmethod
    def reconstruct(chunks: list[str], chunk_overlap: int) -> str:
        """Rebuild the original text by dropping each non-first chunk's overlap."""
        if not chunks:
            return ""
        return chunks[0] + "".join(chunk[chunk_overlap:] for chunk in chunks[1:])
