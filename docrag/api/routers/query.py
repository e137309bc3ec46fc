"""
Query API endpoints.

Routes:
- POST /query - Answer a question from a collection
- POST /query/stream - Stream the answer as plain-text fragments

Dependencies: docrag.application.rag_service
System role: RAG question answering HTTP API
"""

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from docrag.api.deps import get_rag_service
from docrag.api.routers.error_handling import handle_rag_errors
from docrag.application.rag_service import RAGService
from docrag.core.exceptions import DocRAGException
from docrag.models.query import QueryRequest, QueryResponse
from docrag.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
@handle_rag_errors
async def query(
    request: QueryRequest,
    rag_service: RAGService = Depends(get_rag_service),
) -> QueryResponse:
    """
    Answer a question with sources.

    Raises:
        HTTPException(422): Blank question
        HTTPException(504): Query deadline expired
        HTTPException(502): Embedding, retrieval or generation failure
    """
    log_with_context(
        logger,
        logging.INFO,
        "Query received",
        collection=request.collection,
        question=request.question,
        limit=request.limit,
    )
    return await rag_service.answer(request)


@router.post("/stream")
@handle_rag_errors
async def query_stream(
    request: QueryRequest,
    rag_service: RAGService = Depends(get_rag_service),
) -> StreamingResponse:
    """
    Stream an answer as text/plain fragments.

    The first fragment is produced before the response starts, so errors
    up to that point still map to an HTTP status. A failure after that
    aborts the response body.
    """
    stream = rag_service.answer_stream(request)
    try:
        first = await anext(stream)
    except StopAsyncIteration:
        first = ""

    async def body() -> AsyncIterator[str]:
        fragment_count = 1
        try:
            if first:
                yield first
            async for fragment in stream:
                fragment_count += 1
                yield fragment
        except DocRAGException as e:
            log_exception_with_context(
                logger,
                "Answer stream failed mid-response",
                e,
                collection=request.collection,
                fragments=fragment_count,
            )
            raise
        finally:
            await stream.aclose()

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")
