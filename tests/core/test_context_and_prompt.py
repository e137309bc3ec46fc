"""
Test suite for context assembly and the RAG answer prompt.

System role: Verification of prompt construction
"""

from docrag.core.context_assembler import assemble_context
from docrag.core.rag_prompt import RAG_ANSWER_PROMPT, build_messages
from docrag.models.chunk import ChunkMetadata
from docrag.models.query import SearchResult


def result(content: str, source: str = "", page: int | None = None, score: float = 0.9) -> SearchResult:
    return SearchResult(content=content, score=score, metadata=ChunkMetadata(source=source, page=page))


class TestAssembleContext:
    """Test assemble_context."""

    def test_blocks_are_labelled_and_separated(self) -> None:
        """Should label each block with rank, source and page and join with rules."""
        context = assemble_context([
            result("First chunk", "guide.pdf", 3),
            result("Second chunk", "notes.txt", 1),
        ])

        assert context == (
            "[Source 1: guide.pdf, Page 3]\nFirst chunk"
            "\n\n---\n\n"
            "[Source 2: notes.txt, Page 1]\nSecond chunk"
        )

    def test_missing_source_and_page_use_defaults(self) -> None:
        """Should fall back to 'Unknown document' and page 0."""
        assert assemble_context([result("Body")]) == "[Source 1: Unknown document, Page 0]\nBody"

    def test_empty_results(self) -> None:
        """Should produce an empty context for no results."""
        assert assemble_context([]) == ""

    def test_preserves_rank_order(self) -> None:
        """Should keep the retriever's order regardless of score."""
        context = assemble_context([result("low", score=0.1), result("high", score=0.9)])
        assert context.index("low") < context.index("high")


class TestRAGAnswerPrompt:
    """Test the RAG answer prompt template."""

    def test_prompt_should_have_system_and_human_messages(self) -> None:
        """Should build a system message and a human message."""
        messages = build_messages("Be precise.", "ctx", "Why?")

        assert [message.type for message in messages] == ["system", "human"]
        assert messages[0].content == "Be precise."

    def test_human_message_contains_context_and_question(self) -> None:
        """Should embed context and question and restrict answers to the context."""
        messages = build_messages("sys", "[Source 1: a.txt, Page 1]\nFacts", "What happened?")
        human = messages[1].content

        assert human.startswith("Context from documents:\n[Source 1: a.txt, Page 1]\nFacts")
        assert "\n\nQuestion: What happened?\n\n" in human
        assert human.endswith("Answer the question using only the information from the context above.")

    def test_braces_in_system_prompt_are_not_template_variables(self) -> None:
        """Should pass personality text through verbatim."""
        messages = build_messages("Use {curly} braces", "ctx", "q")
        assert messages[0].content == "Use {curly} braces"

    def test_prompt_variables(self) -> None:
        """Should declare exactly the expected input variables."""
        assert set(RAG_ANSWER_PROMPT.input_variables) == {"system_prompt", "context", "question"}
