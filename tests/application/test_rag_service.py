"""
Test suite for the RAG service facade.

Runs indexing, querying and collection management end to end over the
in-memory vector store, the hashing embedder and a scripted generator.

Dependencies: pytest, tests.fakes
System role: Verification of application-layer orchestration
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from docrag.application.rag_service import CHUNKS_PER_PDF_PAGE, RAGService, estimate_page, group_documents
from docrag.core.exceptions import CollectionNotFoundError, ValidationError, VectorStoreError
from docrag.core.orchestrator import NO_RESULTS_MESSAGE
from docrag.models.query import QueryRequest
from tests.fakes import ScriptedGenerationBackend


# ============================================================================
# Helper functions
# ============================================================================


class TestPageEstimate:
    """Test estimate_page."""

    @pytest.mark.parametrize(
        "chunk_index,expected",
        [(0, 1), (CHUNKS_PER_PDF_PAGE - 1, 1), (CHUNKS_PER_PDF_PAGE, 2), (35, 4)],
    )
    def test_pdf_pages(self, chunk_index: int, expected: int) -> None:
        """Should count ten chunks per PDF page."""
        assert estimate_page(chunk_index, "pdf") == expected

    def test_non_pdf_is_page_one(self) -> None:
        """Should place every non-PDF chunk on page 1."""
        assert estimate_page(42, "txt") == 1
        assert estimate_page(42, None) == 1


class TestGroupDocuments:
    """Test group_documents."""

    def test_groups_by_id_prefix_in_first_seen_order(self) -> None:
        """Should count chunks per document and keep first-chunk metadata."""
        ids = ["b_chunk_0", "a_chunk_0", "b_chunk_1", "loose"]
        metadatas = [
            {"file_name": "b.txt", "title": "B", "document_type": "txt"},
            {"source": "a.md"},
            {"file_name": "ignored.txt"},
            None,
        ]

        documents = group_documents(ids, metadatas)

        assert [document.id for document in documents] == ["b", "a", "loose"]
        assert [document.chunk_count for document in documents] == [2, 1, 1]
        assert documents[0].file_name == "b.txt"
        assert documents[0].title == "B"
        assert documents[1].file_name == "a.md"
        assert documents[2].file_name == "Unknown"


# ============================================================================
# Indexing
# ============================================================================


class TestIndexing:
    """Test index_document, index_file and build_chunks."""

    @pytest.mark.asyncio
    async def test_index_document_stores_all_chunks(self, rag_service: RAGService, vector_store, sample_document) -> None:
        """Should store one row per chunk, keyed by the generated document id."""
        result = await rag_service.index_document(sample_document, "science", {"source": "notes.txt"})

        ids, metadatas = await vector_store.get_rows("science")
        assert result.chunk_count == len(ids) > 1
        assert all(chunk_id.startswith(f"{result.document_id}_chunk_") for chunk_id in ids)
        assert {metadata["total_chunks"] for metadata in metadatas} == {result.chunk_count}
        assert sorted(metadata["chunk_index"] for metadata in metadatas) == list(range(result.chunk_count))
        assert all(metadata["source"] == "notes.txt" for metadata in metadatas)
        assert result.processing_time_ms >= 0

    def test_build_chunks_ignores_reserved_metadata(self, rag_service: RAGService, sample_document) -> None:
        """Should compute positional fields even when the caller supplies them."""
        chunks = rag_service.build_chunks("doc", sample_document, {"chunk_index": 99, "page": 7, "course": "bio"})

        assert [chunk.metadata.chunk_index for chunk in chunks] == list(range(len(chunks)))
        assert all(chunk.metadata.page == 1 for chunk in chunks)
        assert chunks[0].metadata.model_extra["course"] == "bio"

    def test_build_chunks_estimates_pdf_pages(self, rag_service: RAGService) -> None:
        """Should advance the page every ten chunks for PDFs."""
        text = " ".join(f"word{i}" for i in range(1500))

        chunks = rag_service.build_chunks("doc", text, {"document_type": "pdf"})

        assert len(chunks) > CHUNKS_PER_PDF_PAGE
        assert chunks[0].metadata.page == 1
        assert chunks[CHUNKS_PER_PDF_PAGE].metadata.page == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text,collection", [("   ", "science"), ("text", ""), ("text", "  ")])
    async def test_rejects_blank_input(self, rag_service: RAGService, text: str, collection: str) -> None:
        """Should reject blank text or collection names."""
        with pytest.raises(ValidationError):
            await rag_service.index_document(text, collection)

    @pytest.mark.asyncio
    async def test_wrongly_typed_metadata_rejected_before_initialization(
        self, rag_service: RAGService, embedding_backend, vector_store
    ) -> None:
        """Should raise ValidationError naming the bad field without touching the backends."""
        with pytest.raises(ValidationError) as exc_info:
            await rag_service.index_document("hello world", "docs", {"title": 5})

        assert exc_info.value.details["field"] == "metadata"
        assert exc_info.value.details["invalid_fields"] == ["title"]
        assert embedding_backend.load_calls == 0
        assert await vector_store.list_collections() == []

    @pytest.mark.asyncio
    async def test_index_file_adds_file_metadata(self, rag_service: RAGService, vector_store, tmp_path: Path) -> None:
        """Should record file name, title and size on each chunk."""
        path = tmp_path / "lecture.md"
        path.write_text("Mitochondria are the powerhouse of the cell.", encoding="utf-8")

        result = await rag_service.index_file(path, "biology")

        _, metadatas = await vector_store.get_rows("biology")
        assert result.chunk_count == 1
        assert metadatas[0]["file_name"] == "lecture.md"
        assert metadatas[0]["title"] == "lecture"
        assert metadatas[0]["file_size"] == path.stat().st_size

    @pytest.mark.asyncio
    async def test_index_file_rejects_unsupported_type(self, rag_service: RAGService, tmp_path: Path) -> None:
        """Should refuse files no text source handles."""
        path = tmp_path / "slides.pptx"
        path.write_bytes(b"PK")

        with pytest.raises(ValidationError):
            await rag_service.index_file(path, "biology")


# ============================================================================
# Querying
# ============================================================================


class TestQuerying:
    """Test answer and answer_stream through the facade."""

    @pytest.mark.asyncio
    async def test_exact_chunk_text_is_top_source(self, rag_service: RAGService, sample_document) -> None:
        """Should rank the chunk matching the question verbatim first."""
        await rag_service.index_document(sample_document, "science")
        chunk = rag_service.build_chunks("probe", sample_document)[1]

        response = await rag_service.answer(QueryRequest(question=chunk.content, collection="science"))

        assert response.answer == "Scripted answer"
        assert response.sources[0].content == chunk.content
        assert response.sources[0].score > 0.9
        assert len(response.sources) <= 3

    @pytest.mark.asyncio
    async def test_empty_collection_returns_no_results(self, rag_service: RAGService, generation_backend) -> None:
        """Should answer with the canonical message without calling the generator."""
        response = await rag_service.answer(QueryRequest(question="Anything?", collection="empty"))

        assert response.answer == NO_RESULTS_MESSAGE
        assert response.sources == []
        assert generation_backend.calls == []

    @pytest.mark.asyncio
    async def test_blank_question_rejected_before_initialization(self, rag_service: RAGService, embedding_backend) -> None:
        """Should raise ValidationError without loading the embedding model."""
        with pytest.raises(ValidationError):
            await rag_service.answer(QueryRequest(question="  ", collection="science"))

        assert embedding_backend.load_calls == 0

    @pytest.mark.asyncio
    async def test_stream_forwards_fragments(self, rag_service: RAGService, sample_document) -> None:
        """Should yield the generator's fragments in order."""
        await rag_service.index_document(sample_document, "science")

        fragments = [
            fragment
            async for fragment in rag_service.answer_stream(
                QueryRequest(question="How do plants use sunlight?", collection="science")
            )
        ]

        assert fragments == ["Scripted ", "answer"]

    @pytest.mark.asyncio
    async def test_prompt_contains_personality_and_sources(
        self, rag_service: RAGService, generation_backend: ScriptedGenerationBackend, sample_document
    ) -> None:
        """Should send the system prompt and labelled sources to the generator."""
        await rag_service.index_document(sample_document, "science", {"source": "bio.txt"})

        await rag_service.answer(QueryRequest(question="What do chloroplasts do?", collection="science", threshold=0.0))

        system, human = generation_backend.calls[0]
        assert system.content == "You answer from documents."
        assert "[Source 1: bio.txt, Page 1]" in human.content
        assert "Question: What do chloroplasts do?" in human.content

    @pytest.mark.asyncio
    async def test_closing_stream_closes_generation_stream(
        self, rag_service: RAGService, generation_backend: ScriptedGenerationBackend, sample_document
    ) -> None:
        """Should release the backend stream as soon as the caller closes the answer stream."""
        generation_backend.fragments = ["one ", "two ", "three"]
        await rag_service.index_document(sample_document, "science")

        stream = rag_service.answer_stream(QueryRequest(question="How do plants use sunlight?", collection="science"))
        assert await anext(stream) == "one "
        await stream.aclose()

        assert generation_backend.streams_closed == 1


# ============================================================================
# Collections
# ============================================================================


class TestCollections:
    """Test collection listing and deletion."""

    @pytest.mark.asyncio
    async def test_list_collections_with_counts(self, rag_service: RAGService, sample_document) -> None:
        """Should report document and chunk counts per collection."""
        first = await rag_service.index_document(sample_document, "science", {"file_name": "a.txt"})
        second = await rag_service.index_document("A short note about rivers.", "science", {"file_name": "b.txt"})
        await rag_service.index_document("Another collection entirely.", "misc")

        collections = {info.name: info for info in await rag_service.list_collections(include_documents=True)}

        science = collections["science"]
        assert science.document_count == 2
        assert science.chunk_count == first.chunk_count + second.chunk_count
        assert {document.file_name for document in science.documents} == {"a.txt", "b.txt"}
        assert collections["misc"].document_count == 1

    @pytest.mark.asyncio
    async def test_documents_omitted_by_default(self, rag_service: RAGService) -> None:
        """Should leave documents unset unless requested."""
        await rag_service.index_document("Some text.", "misc")

        [info] = await rag_service.list_collections()

        assert info.documents is None

    @pytest.mark.asyncio
    async def test_unreadable_collection_listed_with_zero_counts(self, rag_service: RAGService, vector_store) -> None:
        """Should keep listing when one collection's stats fail."""
        await rag_service.index_document("Some text.", "broken")
        vector_store.stats = AsyncMock(side_effect=VectorStoreError("stats failed", operation="stats"))

        [info] = await rag_service.list_collections()

        assert info.name == "broken"
        assert info.document_count == 0
        assert info.chunk_count == 0

    @pytest.mark.asyncio
    async def test_missing_collection_has_no_documents(self, rag_service: RAGService) -> None:
        """Should return an empty list for an unknown collection."""
        assert await rag_service.get_collection_documents("nope") == []

    @pytest.mark.asyncio
    async def test_delete_documents_by_prefix(self, rag_service: RAGService, vector_store, sample_document) -> None:
        """Should delete every chunk of the named documents only."""
        doomed = await rag_service.index_document(sample_document, "science")
        kept = await rag_service.index_document("Rivers carve valleys over time.", "science")

        deleted = await rag_service.delete_documents("science", [doomed.document_id, "unknown-doc"])

        ids, _ = await vector_store.get_rows("science")
        assert deleted == doomed.chunk_count
        assert ids == [f"{kept.document_id}_chunk_0"]

    @pytest.mark.asyncio
    async def test_delete_documents_missing_collection(self, rag_service: RAGService) -> None:
        """Should raise CollectionNotFoundError."""
        with pytest.raises(CollectionNotFoundError):
            await rag_service.delete_documents("nope", ["doc"])

    @pytest.mark.asyncio
    async def test_delete_collection(self, rag_service: RAGService) -> None:
        """Should drop the collection from listings."""
        await rag_service.index_document("Some text.", "temp")

        await rag_service.delete_collection("temp")

        assert await rag_service.list_collections() == []


class TestHealth:
    """Test RAGService.health."""

    @pytest.mark.asyncio
    async def test_reports_components(self, rag_service: RAGService, generation_backend) -> None:
        """Should report generation, vector store and embedding model."""
        generation_backend.healthy = False

        health = await rag_service.health()

        assert health["generation"] is False
        assert health["vector_store"] is True
        assert health["embedding_model"]["name"] == "hashing-test-embedder"
