"""
Context assembly for answer generation.

Renders ranked results into the labelled context block handed to the
generation backend.

Dependencies: docrag.models.query
System role: Prompt context formatting
"""

from docrag.models.query import SearchResult

SOURCE_SEPARATOR = "\n\n---\n\n"
UNKNOWN_SOURCE = "Unknown document"


def format_source_label(rank: int, result: SearchResult) -> str:
    """Return the `[Source N: name, Page P]` label for one result."""
    source = result.metadata.source or UNKNOWN_SOURCE
    page = result.metadata.page or 0
    return f"[Source {rank}: {source}, Page {page}]"


def assemble_context(results: list[SearchResult]) -> str:
    """
    Join results into one context string, in rank order.

    Args:
        results: Ranked search results

    Returns:
        str: Labelled blocks separated by horizontal rules ("" when empty)
    """
    return SOURCE_SEPARATOR.join(
        f"{format_source_label(rank, result)}\n{result.content}"
        for rank, result in enumerate(results, start=1)
    )
