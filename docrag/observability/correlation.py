"""
Correlation ID context.

Carries a per-request correlation id across async boundaries using
contextvars, so log records emitted deep inside the RAG pipeline can be
tied back to the HTTP request that caused them.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import uuid
from contextvars import ContextVar, Token

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def new_correlation_id() -> str:
    """Generate a fresh correlation id."""
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str | None = None) -> Token:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Optional correlation ID (generates new if None)

    Returns:
        Token: Token for reset_correlation_id()
    """
    return correlation_id_ctx.set(correlation_id or new_correlation_id())


def get_correlation_id() -> str:
    """Return the current correlation id ("" outside a request)."""
    return correlation_id_ctx.get()


def reset_correlation_id(token: Token) -> None:
    """Restore the correlation id that was active before set_correlation_id()."""
    correlation_id_ctx.reset(token)
