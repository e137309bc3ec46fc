"""
Health check API endpoints.

Routes: GET /health, GET /health/generation

Dependencies: docrag.application
System role: Health check HTTP API
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from docrag.api.deps import get_rag_service
from docrag.application.rag_service import RAGService


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    components: dict[str, Any] | None = None


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(rag_service: RAGService = Depends(get_rag_service)) -> HealthResponse:
    """Overall health: generation backend, vector store and embedding model."""
    components = await rag_service.health()
    healthy = components["generation"] and components["vector_store"]
    return HealthResponse(
        status="healthy" if healthy else "degraded",
        message="All components reachable" if healthy else "Some components are unreachable",
        components=components,
    )


@router.get("/generation", response_model=HealthResponse)
async def health_check_generation(rag_service: RAGService = Depends(get_rag_service)) -> HealthResponse:
    """Generation backend health check."""
    if await rag_service.generation_backend.health_check():
        return HealthResponse(status="healthy", message="Generation backend reachable")
    return HealthResponse(status="unhealthy", message="Generation backend unreachable")
