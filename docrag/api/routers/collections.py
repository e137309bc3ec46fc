"""
Collection API endpoints.

Routes:
- GET /collections - List collections with counts
- GET /collections/{name}/documents - List documents of a collection
- POST /collections/{name}/documents - Index raw text into a collection
- DELETE /collections/{name}/documents - Delete documents from a collection
- DELETE /collections/{name} - Drop a collection

Dependencies: docrag.application.rag_service
System role: Collection and indexing HTTP API
"""

from fastapi import APIRouter, Depends, Query, status

from docrag.api.deps import get_rag_service
from docrag.api.routers.error_handling import handle_rag_errors
from docrag.application.rag_service import RAGService
from docrag.models.document import (
    CollectionInfo,
    DeleteDocumentsRequest,
    DocumentInfo,
    IndexResult,
    IndexTextRequest,
)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=list[CollectionInfo], response_model_exclude_none=True)
@handle_rag_errors
async def list_collections(
    include_documents: bool = Query(default=False, description="Include per-document summaries"),
    rag_service: RAGService = Depends(get_rag_service),
) -> list[CollectionInfo]:
    """List collections with document and chunk counts."""
    return await rag_service.list_collections(include_documents=include_documents)


@router.get("/{name}/documents", response_model=list[DocumentInfo])
@handle_rag_errors
async def get_collection_documents(
    name: str,
    rag_service: RAGService = Depends(get_rag_service),
) -> list[DocumentInfo]:
    """List the documents stored in a collection."""
    return await rag_service.get_collection_documents(name)


@router.post("/{name}/documents", response_model=IndexResult, status_code=status.HTTP_201_CREATED)
@handle_rag_errors
async def index_text(
    name: str,
    request: IndexTextRequest,
    rag_service: RAGService = Depends(get_rag_service),
) -> IndexResult:
    """Chunk, embed and store a document's text."""
    return await rag_service.index_document(request.text, name, request.metadata)


@router.delete("/{name}/documents")
@handle_rag_errors
async def delete_documents(
    name: str,
    request: DeleteDocumentsRequest,
    rag_service: RAGService = Depends(get_rag_service),
) -> dict[str, int]:
    """Delete every chunk of the given documents."""
    deleted = await rag_service.delete_documents(name, request.document_ids)
    return {"deleted_chunks": deleted}


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
@handle_rag_errors
async def delete_collection(
    name: str,
    rag_service: RAGService = Depends(get_rag_service),
) -> None:
    """Drop a collection with all its chunks."""
    await rag_service.delete_collection(name)
