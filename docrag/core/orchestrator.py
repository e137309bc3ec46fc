"""
RAG query orchestration.

Coordinates one query end to end: embed the question, run tiered
retrieval, assemble context, build the prompt and call the generation
backend either once or as a token stream.

Lifecycle per query:
    IDLE -> EMBEDDING_QUERY -> SEARCHING -> CONTEXT_ASSEMBLED -> GENERATING
    -> COMPLETED | FAILED

An empty retrieval is a successful answer carrying NO_RESULTS_MESSAGE.
An overall deadline races the whole pipeline; on expiry QueryTimeoutError
is raised. In-flight backend calls are not cancelled beyond that, the
orchestrator just stops waiting on them.

Dependencies: asyncio, docrag.core, docrag.boundary (interfaces only)
System role: RAG query lifecycle
"""

import asyncio
import logging
import time
import uuid
from collections.abc import AsyncIterator, Awaitable
from enum import Enum
from typing import TypeVar

from docrag.boundary.llm.base import GenerationBackend
from docrag.boundary.personality import PersonalityProvider
from docrag.core.context_assembler import assemble_context
from docrag.core.embedding_service import EmbeddingService
from docrag.core.exceptions import QueryTimeoutError, ValidationError
from docrag.core.rag_prompt import build_messages
from docrag.core.retriever import RetrievalMode, Retriever
from docrag.models.query import QueryRequest, QueryResponse, SearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_RESULTS_MESSAGE = (
    "I could not find relevant information in the available documents. "
    "Try rephrasing your question or be more specific."
)


class QueryState(str, Enum):
    """Query lifecycle states."""

    IDLE = "idle"
    EMBEDDING_QUERY = "embedding_query"
    SEARCHING = "searching"
    CONTEXT_ASSEMBLED = "context_assembled"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class QueryOrchestrator:
    """Runs RAG queries against injected collaborators."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        retriever: Retriever,
        generation_backend: GenerationBackend,
        personality_provider: PersonalityProvider,
        default_limit: int = 5,
        timeout_seconds: float = 300.0,
        temperature: float | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            embedding_service: Embeds the question
            retriever: Tiered similarity search
            generation_backend: Answer generator
            personality_provider: Source of the system instruction
            default_limit: Sources per answer when the request sets none
            timeout_seconds: Overall deadline per query
            temperature: Sampling temperature forwarded to the backend
        """
        self._embedding_service = embedding_service
        self._retriever = retriever
        self._generation_backend = generation_backend
        self._personality_provider = personality_provider
        self._default_limit = default_limit
        self._timeout_seconds = timeout_seconds
        self._temperature = temperature

    @staticmethod
    def validate_request(request: QueryRequest) -> None:
        """Reject a blank question before any I/O."""
        if not request.question or not request.question.strip():
            raise ValidationError("Question must not be empty", field="question")

    @staticmethod
    def _transition(query_id: str, state: QueryState, detail: str = "") -> None:
        suffix = f" {detail}" if detail else ""
        logger.info(f"{__name__}:query - query_id={query_id} state={state.value}{suffix}")

    async def _retrieve(
        self,
        query_id: str,
        request: QueryRequest,
        mode: RetrievalMode,
    ) -> list[SearchResult]:
        self._transition(query_id, QueryState.EMBEDDING_QUERY)
        query_vector = await self._embedding_service.embed_query(request.question)

        self._transition(query_id, QueryState.SEARCHING, f"collection={request.collection} mode={mode.value}")
        return await self._retriever.search(
            collection=request.collection,
            query_vector=query_vector,
            limit=request.limit or self._default_limit,
            requested_threshold=request.threshold,
            mode=mode,
        )

    async def _build_messages(self, query_id: str, request: QueryRequest, results: list[SearchResult]):
        context = assemble_context(results)
        self._transition(query_id, QueryState.CONTEXT_ASSEMBLED, f"sources={len(results)} context_len={len(context)}")
        system_prompt = await self._personality_provider.system_prompt()
        return build_messages(system_prompt, context, request.question)

    async def answer(self, request: QueryRequest) -> QueryResponse:
        """
        Answer a question with a single generation call.

        Args:
            request: Question, collection and optional limit/threshold

        Returns:
            QueryResponse: Answer, ranked sources and elapsed time

        Raises:
            ValidationError: Blank question (before any I/O)
            EmbeddingError, RetrievalError, GenerationError: Propagated from collaborators
            QueryTimeoutError: Deadline expired
        """
        self.validate_request(request)
        query_id = uuid.uuid4().hex[:12]
        start_time = time.perf_counter()
        self._transition(query_id, QueryState.IDLE)

        try:
            response = await asyncio.wait_for(
                self._run_answer(query_id, request, start_time),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._transition(query_id, QueryState.FAILED, "reason=timeout")
            raise QueryTimeoutError(self._timeout_seconds) from None
        except Exception as e:
            self._transition(query_id, QueryState.FAILED, f"error={type(e).__name__}: {e}")
            raise

        self._transition(query_id, QueryState.COMPLETED, f"processing_time_ms={response.processing_time_ms:.0f}")
        return response

    async def _run_answer(self, query_id: str, request: QueryRequest, start_time: float) -> QueryResponse:
        results = await self._retrieve(query_id, request, RetrievalMode.SINGLE_SHOT)
        if not results:
            return QueryResponse(
                answer=NO_RESULTS_MESSAGE,
                sources=[],
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        messages = await self._build_messages(query_id, request, results)
        self._transition(query_id, QueryState.GENERATING)
        answer = await self._generation_backend.generate(messages, temperature=self._temperature)
        return QueryResponse(
            answer=answer,
            sources=results,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    async def answer_stream(self, request: QueryRequest) -> AsyncIterator[str]:
        """
        Answer a question as a stream of text fragments.

        Fragments are forwarded verbatim in generation order. When retrieval
        finds nothing a single NO_RESULTS_MESSAGE fragment is yielded.
        Fragments already yielded stay valid if the stream later fails.

        Args:
            request: Question, collection and optional limit/threshold

        Yields:
            str: Answer fragments

        Raises:
            ValidationError: Blank question (before any I/O)
            EmbeddingError, RetrievalError, GenerationError: Propagated from collaborators
            QueryTimeoutError: Deadline expired
        """
        self.validate_request(request)
        query_id = uuid.uuid4().hex[:12]
        deadline = time.monotonic() + self._timeout_seconds
        self._transition(query_id, QueryState.IDLE)

        fragment_count = 0
        try:
            results = await self._before_deadline(
                self._retrieve(query_id, request, RetrievalMode.STREAMING), deadline
            )
            if not results:
                self._transition(query_id, QueryState.COMPLETED, "sources=0")
                yield NO_RESULTS_MESSAGE
                return

            messages = await self._before_deadline(self._build_messages(query_id, request, results), deadline)
            self._transition(query_id, QueryState.GENERATING)
            stream = self._generation_backend.generate_stream(messages, temperature=self._temperature)
            try:
                while True:
                    try:
                        fragment = await self._before_deadline(anext(stream), deadline)
                    except StopAsyncIteration:
                        break
                    fragment_count += 1
                    yield fragment
            finally:
                aclose = getattr(stream, "aclose", None)
                if aclose is not None:
                    await aclose()
        except Exception as e:
            self._transition(
                query_id,
                QueryState.FAILED,
                f"fragments={fragment_count} error={type(e).__name__}: {e}",
            )
            raise

        self._transition(query_id, QueryState.COMPLETED, f"fragments={fragment_count}")

    async def _before_deadline(self, awaitable: Awaitable[T], deadline: float) -> T:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise QueryTimeoutError(self._timeout_seconds)
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError:
            raise QueryTimeoutError(self._timeout_seconds) from None
