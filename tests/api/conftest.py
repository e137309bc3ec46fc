"""
API test fixtures.

Provides a TestClient whose RAG service dependency is the in-memory
rag_service fixture. The client is not entered as a context manager, so
the startup lifespan (model warm-up) does not run.
"""

import pytest
from fastapi.testclient import TestClient

from docrag.api.deps import get_rag_service
from docrag.api.main import create_app
from docrag.application.rag_service import RAGService
from docrag.configs import Settings


@pytest.fixture
def client(rag_service: RAGService, test_settings: Settings) -> TestClient:
    app = create_app(test_settings)
    app.dependency_overrides[get_rag_service] = lambda: rag_service
    return TestClient(app)
