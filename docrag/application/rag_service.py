"""
RAG service facade.

Single entry point used by the HTTP API: indexing, question answering and
collection management over the core pipeline.

Dependencies: docrag.core, docrag.boundary, docrag.configs
System role: Application-layer orchestration of indexing and querying
"""

import asyncio
import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import aclosing
from pathlib import Path
from typing import Any

import pydantic

from docrag.boundary.embeddings.sentence_transformer import SentenceTransformerBackend
from docrag.boundary.llm.base import GenerationBackend
from docrag.boundary.llm.ollama_client import OllamaClient
from docrag.boundary.personality import FilePersonalityProvider, PersonalityProvider
from docrag.boundary.text_source import DocumentTextSource, PlainTextSource
from docrag.boundary.vdb.base import VectorStore
from docrag.boundary.vdb.vector_store_factory import get_vector_store
from docrag.configs.settings import Settings
from docrag.core.chunker import TextChunker
from docrag.core.embedding_cache import EmbeddingCache
from docrag.core.embedding_service import EmbeddingService
from docrag.core.exceptions import CollectionNotFoundError, DocRAGException, ValidationError
from docrag.core.orchestrator import QueryOrchestrator
from docrag.core.retriever import Retriever
from docrag.models.chunk import CHUNK_ID_SEPARATOR, Chunk, ChunkMetadata, document_id_from_chunk_id, make_chunk_id
from docrag.models.document import CollectionInfo, DocumentInfo, IndexResult
from docrag.models.query import QueryRequest, QueryResponse

logger = logging.getLogger(__name__)

CHUNKS_PER_PDF_PAGE = 10
_RESERVED_METADATA = {"chunk_index", "total_chunks", "page"}


def estimate_page(chunk_index: int, document_type: str | None) -> int:
    """Rough page number: ten chunks per page for PDFs, page 1 otherwise."""
    if document_type == "pdf":
        return chunk_index // CHUNKS_PER_PDF_PAGE + 1
    return 1


def group_documents(ids: list[str], metadatas: list[dict[str, Any]]) -> list[DocumentInfo]:
    """
    Group chunk rows into per-document summaries.

    Documents are keyed by the id prefix before `_chunk_` and keep the
    metadata of their first chunk, in first-seen order.
    """
    documents: dict[str, DocumentInfo] = {}
    for chunk_id, metadata in zip(ids, metadatas):
        metadata = metadata or {}
        document_id = document_id_from_chunk_id(chunk_id)
        document = documents.get(document_id)
        if document is None:
            document = DocumentInfo(
                id=document_id,
                file_name=metadata.get("file_name") or metadata.get("source") or "Unknown",
                title=metadata.get("title") or None,
                file_size=metadata.get("file_size") or None,
                document_type=metadata.get("document_type") or None,
            )
            documents[document_id] = document
        document.chunk_count += 1
    return list(documents.values())


class RAGService:
    """
    Document RAG facade.

    Owns the chunker, embedding service, vector store and query
    orchestrator. Collaborators are injected; from_settings() wires the
    production defaults.
    """

    def __init__(
        self,
        settings: Settings,
        vector_store: VectorStore,
        embedding_service: EmbeddingService,
        generation_backend: GenerationBackend,
        personality_provider: PersonalityProvider,
        text_sources: list[DocumentTextSource] | None = None,
    ) -> None:
        """
        Initialize RAG service.

        Args:
            settings: Application settings
            vector_store: Vector store for chunks and embeddings
            embedding_service: Cached embedding access
            generation_backend: Answer generator
            personality_provider: System prompt source
            text_sources: File text extractors (plain text when None)
        """
        rag = settings.rag
        self._settings = settings
        self._vector_store = vector_store
        self._embedding_service = embedding_service
        self._generation_backend = generation_backend
        self._text_sources = text_sources or [PlainTextSource(rag.max_file_size_mb)]
        self._chunker = TextChunker(rag.chunk_size, rag.chunk_overlap)
        self._orchestrator = QueryOrchestrator(
            embedding_service=embedding_service,
            retriever=Retriever(vector_store, default_threshold=rag.similarity_threshold),
            generation_backend=generation_backend,
            personality_provider=personality_provider,
            default_limit=rag.max_results,
            timeout_seconds=rag.query_timeout_seconds,
            temperature=settings.generation.temperature,
        )
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RAGService":
        """Build the service with Chroma/in-memory storage, sentence-transformers and Ollama."""
        rag = settings.rag
        generation = settings.generation
        embedding_service = EmbeddingService(
            backend=SentenceTransformerBackend(rag.embedding_model),
            cache=EmbeddingCache(rag.embedding_cache_size),
            batch_size=rag.embedding_batch_size,
            concurrency=rag.embedding_concurrency,
        )
        generation_backend = OllamaClient(
            endpoint=generation.endpoint,
            model=generation.model,
            enable_thinking=generation.enable_thinking,
            default_temperature=generation.temperature,
            timeout=generation.request_timeout_seconds,
        )
        return cls(
            settings=settings,
            vector_store=get_vector_store(settings.vector_store),
            embedding_service=embedding_service,
            generation_backend=generation_backend,
            personality_provider=FilePersonalityProvider(rag.personality_file),
        )

    @property
    def embedding_service(self) -> EmbeddingService:
        return self._embedding_service

    @property
    def vector_store(self) -> VectorStore:
        return self._vector_store

    @property
    def generation_backend(self) -> GenerationBackend:
        return self._generation_backend

    async def initialize(self) -> None:
        """Connect the vector store and load the embedding model once."""
        if self._initialized:
            return
        async with self._init_lock:
            if self._initialized:
                return
            logger.info(f"{__name__}:initialize - Initializing RAG service")
            await self._vector_store.initialize()
            await self._embedding_service.initialize()
            self._initialized = True
            logger.info(f"{__name__}:initialize - RAG service initialized")

    # =========================================================================
    # Indexing
    # =========================================================================

    def build_chunks(
        self,
        document_id: str,
        text: str,
        metadata: dict[str, Any] | None = None,
    ) -> list[Chunk]:
        """
        Split text into chunks carrying positional metadata.

        Caller metadata is merged in; chunk position fields are always
        computed here.

        Raises:
            ValidationError: Caller metadata has wrongly typed fields
        """
        extra = {key: value for key, value in (metadata or {}).items() if key not in _RESERVED_METADATA}
        extra.setdefault("source", "")
        extra.setdefault("document_type", "txt")

        pieces = self._chunker.chunk(text)
        try:
            return [
                Chunk(
                    id=make_chunk_id(document_id, index),
                    content=content,
                    metadata=ChunkMetadata(
                        **extra,
                        page=estimate_page(index, extra["document_type"]),
                        chunk_index=index,
                        total_chunks=len(pieces),
                    ),
                )
                for index, content in enumerate(pieces)
            ]
        except pydantic.ValidationError as e:
            invalid_fields = sorted({str(error["loc"][0]) for error in e.errors() if error["loc"]})
            raise ValidationError(
                f"Invalid document metadata: {', '.join(invalid_fields)}",
                field="metadata",
                details={"invalid_fields": invalid_fields},
            ) from e

    async def index_document(
        self,
        text: str,
        collection: str,
        metadata: dict[str, Any] | None = None,
    ) -> IndexResult:
        """
        Chunk, embed and store a document's text.

        Args:
            text: Document text
            collection: Target collection (created on first write)
            metadata: Extra metadata stored on every chunk

        Returns:
            IndexResult: Generated document id, chunk count and timing

        Raises:
            ValidationError: Empty text or collection name, or invalid metadata
            EmbeddingError: Embedding backend failure
            VectorStoreError: Storage failure
        """
        if not collection or not collection.strip():
            raise ValidationError("Collection name must not be empty", field="collection")
        if not text or not text.strip():
            raise ValidationError("No text to index", field="text")

        start_time = time.perf_counter()
        document_id = str(uuid.uuid4())
        chunks = self.build_chunks(document_id, text, metadata)
        await self.initialize()
        logger.info(
            f"{__name__}:index_document - document_id={document_id} "
            f"collection={collection} chunks={len(chunks)}"
        )

        vectors = await self._embedding_service.embed_batch([chunk.content for chunk in chunks])
        await self._vector_store.upsert(
            collection,
            ids=[chunk.id for chunk in chunks],
            vectors=vectors,
            documents=[chunk.content for chunk in chunks],
            metadatas=[chunk.metadata.to_store_metadata() for chunk in chunks],
        )

        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"{__name__}:index_document - Indexed document_id={document_id} in {processing_time_ms:.0f}ms")
        return IndexResult(
            document_id=document_id,
            chunk_count=len(chunks),
            processing_time_ms=processing_time_ms,
        )

    async def index_file(
        self,
        path: str | Path,
        collection: str,
        metadata: dict[str, Any] | None = None,
    ) -> IndexResult:
        """
        Extract a file's text and index it.

        File name, title, size and type are added to the chunk metadata;
        explicit metadata wins over them.

        Raises:
            ValidationError: Unsupported, missing or oversized file, or no text
        """
        path = Path(path)
        source = next((candidate for candidate in self._text_sources if candidate.supports(path)), None)
        if source is None:
            raise ValidationError(f"Unsupported file type: {path.suffix or path.name}", field="path")

        text = await source.extract_text(path)
        file_metadata: dict[str, Any] = {
            "source": path.name,
            "file_name": path.name,
            "title": path.stem,
            "file_size": path.stat().st_size,
            "document_type": source.document_type,
        }
        return await self.index_document(text, collection, {**file_metadata, **(metadata or {})})

    # =========================================================================
    # Querying
    # =========================================================================

    async def answer(self, request: QueryRequest) -> QueryResponse:
        """Answer a question with a single generation call."""
        QueryOrchestrator.validate_request(request)
        await self.initialize()
        return await self._orchestrator.answer(request)

    async def answer_stream(self, request: QueryRequest) -> AsyncIterator[str]:
        """Answer a question as a stream of text fragments."""
        QueryOrchestrator.validate_request(request)
        await self.initialize()
        async with aclosing(self._orchestrator.answer_stream(request)) as stream:
            async for fragment in stream:
                yield fragment

    # =========================================================================
    # Collections
    # =========================================================================

    async def list_collections(self, include_documents: bool = False) -> list[CollectionInfo]:
        """
        List collections with chunk and document counts.

        A collection whose details cannot be read is still listed, with
        zero counts.
        """
        await self.initialize()
        collections: list[CollectionInfo] = []
        for name in await self._vector_store.list_collections():
            if not name or not name.strip():
                continue
            try:
                stats = await self._vector_store.stats(name)
                documents = await self.get_collection_documents(name)
            except DocRAGException as e:
                logger.warning(f"{__name__}:list_collections - Failed to read collection {name}: {e}")
                collections.append(CollectionInfo(name=name, documents=[] if include_documents else None))
                continue
            collections.append(
                CollectionInfo(
                    name=name,
                    document_count=len(documents),
                    chunk_count=stats.count,
                    documents=documents if include_documents else None,
                )
            )
        return collections

    async def get_collection_documents(self, collection: str) -> list[DocumentInfo]:
        """Return per-document summaries of a collection ([] when missing)."""
        await self.initialize()
        if not await self._vector_store.has_collection(collection):
            return []
        ids, metadatas = await self._vector_store.get_rows(collection)
        return group_documents(ids, metadatas)

    async def delete_documents(self, collection: str, document_ids: list[str]) -> int:
        """
        Delete every chunk of the given documents.

        Returns:
            int: Number of chunks deleted

        Raises:
            CollectionNotFoundError: Collection does not exist
        """
        await self.initialize()
        if not await self._vector_store.has_collection(collection):
            raise CollectionNotFoundError(collection)

        prefixes = tuple(f"{document_id}{CHUNK_ID_SEPARATOR}" for document_id in document_ids)
        ids, _ = await self._vector_store.get_rows(collection)
        to_delete = [chunk_id for chunk_id in ids if chunk_id.startswith(prefixes)]
        if to_delete:
            await self._vector_store.delete(collection, to_delete)
        logger.info(
            f"{__name__}:delete_documents - Deleted {len(to_delete)} chunks of "
            f"{len(document_ids)} documents from {collection}"
        )
        return len(to_delete)

    async def delete_collection(self, collection: str) -> None:
        """Drop a collection with all its chunks."""
        await self.initialize()
        await self._vector_store.delete_collection(collection)
        logger.info(f"{__name__}:delete_collection - Deleted collection {collection}")

    # =========================================================================
    # Health
    # =========================================================================

    async def health(self) -> dict[str, Any]:
        """Report generation backend, vector store and embedding model status."""
        generation_ok = await self._generation_backend.health_check()
        try:
            vector_store_ok = await self._vector_store.heartbeat()
        except DocRAGException as e:
            logger.warning(f"{__name__}:health - Vector store heartbeat failed: {e}")
            vector_store_ok = False
        return {
            "generation": generation_ok,
            "vector_store": vector_store_ok,
            "embedding_model": self._embedding_service.model_info(),
        }
