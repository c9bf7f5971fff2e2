"""Resilient wrapper for search capabilities.

Any search call is retried with ``with_retry``. When retries are exhausted the
caller still gets a ``SearchResponse``: empty results, an ``error`` explaining
what went wrong, and a ``message`` telling the model how to continue.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import BaseModel, Field

from research_orchestrator.errors.exceptions import (
    OperationTimeoutError,
    RateLimitError,
    SearchTimeoutError,
    ToolExecutionError,
)
from research_orchestrator.errors.handling import format_error_for_user, root_cause
from research_orchestrator.errors.retry import RetryPolicy, with_retry

logger = logging.getLogger(__name__)

_RATE_LIMIT_PATTERN = re.compile(r"rate limit|429", re.IGNORECASE)

RATE_LIMIT_MESSAGE = (
    "Search service is temporarily rate-limited. Please continue with available "
    "information or try again shortly."
)
TIMEOUT_MESSAGE = (
    "The search took too long to complete. Try a more specific search query or "
    "continue with available information."
)
FAILURE_MESSAGE = (
    "Search encountered an error. Please continue with other available information "
    "or try a different query."
)


class SearchResponse(BaseModel):
    """Search outcome returned to the model, degraded or not."""

    query: str
    results: list[dict[str, Any]] = Field(default_factory=list)
    message: str
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.error is not None


async def resilient_search(
    query: str,
    operation: Callable[[], Awaitable[Sequence[dict[str, Any]]]],
    *,
    service: str = "search",
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> SearchResponse:
    """Run a search call with retries, degrading to an empty result on failure.

    Args:
        query: The query being searched, echoed in the response.
        operation: Zero-argument coroutine function performing one search call.
        service: Service name used in logs and tool errors.
        policy: Retry settings. Defaults to ``RetryPolicy()``.
        sleep: Override for the backoff sleep.

    Returns:
        A ``SearchResponse``. Never raises for search failures.
    """
    policy = policy or RetryPolicy()
    retry_kwargs = {"sleep": sleep} if sleep is not None else {}
    try:
        results = await with_retry(operation, policy, **retry_kwargs)
    except Exception as exc:
        cause = root_cause(exc)
        logger.warning("%s search for %r failed: %s", service, query, cause)

        if isinstance(cause, RateLimitError) or _RATE_LIMIT_PATTERN.search(str(cause)):
            return SearchResponse(
                query=query,
                error="Search rate limit exceeded. Please wait a moment.",
                message=RATE_LIMIT_MESSAGE,
            )

        if isinstance(cause, OperationTimeoutError | SearchTimeoutError | TimeoutError) or (
            "timed out" in str(cause)
        ):
            return SearchResponse(
                query=query,
                error=format_error_for_user(SearchTimeoutError(query, policy.timeout_seconds)),
                message=TIMEOUT_MESSAGE,
            )

        tool_error = (
            cause
            if isinstance(cause, ToolExecutionError)
            else ToolExecutionError(service, str(cause), cause=cause)
        )
        return SearchResponse(
            query=query,
            error=format_error_for_user(tool_error),
            message=FAILURE_MESSAGE,
        )

    items = list(results)
    return SearchResponse(
        query=query,
        results=items,
        message=f"Found {len(items)} results for: {query}",
    )
