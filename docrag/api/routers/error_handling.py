"""
RAG error handling for API endpoints.

Maps domain exceptions onto HTTP status codes in one place.

Dependencies: fastapi, docrag.core.exceptions
System role: Domain error to HTTP response translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from docrag.core.exceptions import (
    CollectionNotFoundError,
    DocRAGException,
    QueryTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def to_http_exception(error: DocRAGException) -> HTTPException:
    """Translate a domain exception into an HTTPException."""
    if isinstance(error, ValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, CollectionNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, QueryTimeoutError):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return HTTPException(
        status_code=status_code,
        detail={"error": type(error).__name__, "message": error.message, "details": error.details},
    )


def handle_rag_errors(func: F) -> F:
    """
    Decorator turning DocRAGException into HTTPException.

    Client errors are logged as warnings, backend failures as errors.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except (ValidationError, CollectionNotFoundError) as e:
            logger.warning(f"{func.__name__} rejected: {e}", extra={"error_type": type(e).__name__})
            raise to_http_exception(e) from e
        except DocRAGException as e:
            logger.error(f"{func.__name__} failed: {e}", extra={"error_type": type(e).__name__})
            raise to_http_exception(e) from e

    return wrapper  # type: ignore
