"""
Logging utilities for structured logging.

Helpers that turn arbitrary values (questions, vectors, metadata) into
short log-safe strings before they are passed as `extra=` context.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a bounded string for logging.

    Sequences and mappings are summarised by size, so embedding vectors and
    chunk lists never end up in the log verbatim.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        text = value
    elif isinstance(value, (list, tuple)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = str(value)

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log a message with sanitized `extra=` context."""
    logger.log(level, message, extra={key: safe_log_value(value) for key, value in context.items()})


def log_exception_with_context(logger: logging.Logger, message: str, exc: BaseException, **context: Any) -> None:
    """Log an exception with traceback and sanitized context."""
    extra = {key: safe_log_value(value) for key, value in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
