"""
Shared test fixtures and configuration for entire test suite.

Provides: deterministic embedding backend, scripted generation backend,
in-memory vector store, wired RAG service
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

import pytest

from docrag.application.rag_service import RAGService
from docrag.boundary.personality import StaticPersonalityProvider
from docrag.boundary.vdb.memory_store import InMemoryVectorStore
from docrag.configs import GenerationSettings, RAGSettings, Settings, VectorStoreSettings
from docrag.core.embedding_cache import EmbeddingCache
from docrag.core.embedding_service import EmbeddingService
from tests.fakes import HashingEmbeddingBackend, ScriptedGenerationBackend


@pytest.fixture
def embedding_backend() -> HashingEmbeddingBackend:
    return HashingEmbeddingBackend()


@pytest.fixture
def embedding_service(embedding_backend: HashingEmbeddingBackend) -> EmbeddingService:
    return EmbeddingService(embedding_backend, cache=EmbeddingCache(1000), batch_size=50, concurrency=4)


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def generation_backend() -> ScriptedGenerationBackend:
    return ScriptedGenerationBackend()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with small chunks and an in-memory store, independent of the environment."""
    return Settings(
        rag=RAGSettings(
            chunk_size=200,
            chunk_overlap=50,
            max_results=3,
            similarity_threshold=0.3,
            query_timeout_seconds=5.0,
        ),
        vector_store=VectorStoreSettings(store_type="memory"),
        generation=GenerationSettings(),
    )


@pytest.fixture
def rag_service(
    test_settings: Settings,
    vector_store: InMemoryVectorStore,
    embedding_service: EmbeddingService,
    generation_backend: ScriptedGenerationBackend,
) -> RAGService:
    return RAGService(
        settings=test_settings,
        vector_store=vector_store,
        embedding_service=embedding_service,
        generation_backend=generation_backend,
        personality_provider=StaticPersonalityProvider("You answer from documents."),
    )


@pytest.fixture
def sample_document() -> str:
    """Three distinct paragraphs, long enough to span several 200-char chunks."""
    return (
        "Photosynthesis converts light energy into chemical energy inside chloroplasts. "
        "Plants absorb carbon dioxide and release oxygen while producing glucose for growth. "
        "Chlorophyll pigments capture mostly red and blue wavelengths of sunlight. "
        "The Calvin cycle fixes carbon using ATP and NADPH from the light reactions. "
        "Volcanic eruptions eject magma, ash and gases from the mantle through the crust. "
        "Pyroclastic flows move quickly down the slopes and destroy everything nearby. "
        "Basalt forms when lava cools rapidly at the surface of the earth."
    )
