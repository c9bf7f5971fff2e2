"""Error classification and user-facing formatting.

Classification here is advisory: ``with_retry`` retries everything, and these
helpers only decide what a degraded result should say.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import TypeVar

from research_orchestrator.errors.exceptions import (
    MCPConnectionError,
    OrchestratorError,
    RateLimitError,
    RetryExhaustedError,
    SearchTimeoutError,
    ToolExecutionError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"timeout",
        r"timed out",
        r"ETIMEDOUT",
        r"ECONNREFUSED",
        r"ENOTFOUND",
        r"network",
        r"socket hang up",
        r"rate limit",
        r"429",
        r"502",
        r"503",
    )
]

_MISSING = object()


def root_cause(error: BaseException) -> BaseException:
    """Unwrap a ``RetryExhaustedError`` to the last underlying failure."""
    if isinstance(error, RetryExhaustedError) and error.cause is not None:
        return error.cause
    return error


def is_retryable_error(error: BaseException) -> bool:
    """Return True if the error looks transient (network, timeout, rate limit)."""
    if isinstance(error, RateLimitError | SearchTimeoutError | TimeoutError):
        return True
    message = str(error)
    return any(pattern.search(message) for pattern in _RETRYABLE_PATTERNS)


def format_error_for_user(error: BaseException) -> str:
    """Render an error as a short message suitable for a chat transcript.

    Args:
        error: Any exception raised by a capability.

    Returns:
        A human-readable explanation.
    """
    if isinstance(error, SearchTimeoutError):
        return (
            "Search is taking longer than expected. "
            f'The search for "{error.query}" timed out. Please try a more specific query.'
        )
    if isinstance(error, MCPConnectionError):
        return (
            f"Unable to connect to external service '{error.server_name}'. "
            "This feature may be temporarily unavailable."
        )
    if isinstance(error, RateLimitError):
        return f"Too many requests to {error.service}. Please wait a moment before trying again."
    if isinstance(error, ToolExecutionError):
        return (
            f"A tool encountered an error and couldn't complete: {error.tool_name}. "
            "Continuing with available tools."
        )
    if isinstance(error, OrchestratorError):
        return error.message
    return "An unexpected error occurred. Please try again."


async def safe_tool_execution(
    tool_name: str,
    fn: Callable[[], Awaitable[T]],
    fallback: T | object = _MISSING,
) -> T:
    """Run a tool body, converting failures into ``ToolExecutionError``.

    Args:
        tool_name: Name used in logs and the raised error.
        fn: Zero-argument coroutine function with the tool body.
        fallback: Value returned instead of raising, if given.

    Returns:
        The tool result, or ``fallback`` on failure.

    Raises:
        ToolExecutionError: If the tool fails and no fallback was given.
    """
    try:
        return await fn()
    except Exception as exc:
        logger.error("Tool '%s' failed: %s", tool_name, exc)
        if fallback is not _MISSING:
            logger.warning("Returning fallback value for tool '%s'", tool_name)
            return fallback  # type: ignore[return-value]
        if isinstance(exc, ToolExecutionError):
            raise
        raise ToolExecutionError(tool_name, str(exc), cause=exc) from exc
