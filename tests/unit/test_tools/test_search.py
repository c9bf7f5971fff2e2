"""Tests for the resilient search wrapper."""

from __future__ import annotations

from typing import Any

import pytest

from research_orchestrator.errors.exceptions import RateLimitError
from research_orchestrator.errors.retry import RetryPolicy
from research_orchestrator.tools.search import (
    FAILURE_MESSAGE,
    RATE_LIMIT_MESSAGE,
    TIMEOUT_MESSAGE,
    resilient_search,
)


async def _no_sleep(delay: float) -> None:
    return None


def _failing(error: Exception) -> Any:
    calls: list[int] = []

    async def operation() -> list[dict[str, Any]]:
        calls.append(1)
        raise error

    operation.calls = calls  # type: ignore[attr-defined]
    return operation


class TestResilientSearch:
    """Tests for resilient_search."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        """Results are returned with a count message."""

        async def operation() -> list[dict[str, Any]]:
            return [{"url": "https://a.example"}, {"url": "https://b.example"}]

        response = await resilient_search("gpu prices", operation, sleep=_no_sleep)

        assert response.degraded is False
        assert len(response.results) == 2
        assert response.message == "Found 2 results for: gpu prices"

    @pytest.mark.asyncio
    async def test_rate_limit_degrades(self) -> None:
        """Exhausted rate limits produce an empty degraded response."""
        operation = _failing(RateLimitError("tavily"))

        response = await resilient_search("gpu prices", operation, sleep=_no_sleep)

        assert response.degraded is True
        assert response.results == []
        assert response.error == "Search rate limit exceeded. Please wait a moment."
        assert response.message == RATE_LIMIT_MESSAGE
        assert len(operation.calls) == 3

    @pytest.mark.asyncio
    async def test_rate_limit_by_message(self) -> None:
        """HTTP 429 messages are treated as rate limits."""
        operation = _failing(RuntimeError("HTTP 429 Too Many Requests"))
        response = await resilient_search("q", operation, sleep=_no_sleep)
        assert response.message == RATE_LIMIT_MESSAGE

    @pytest.mark.asyncio
    async def test_timeout_degrades(self) -> None:
        """Per-attempt timeouts produce the timeout guidance."""
        operation = _failing(TimeoutError("read timed out"))
        policy = RetryPolicy(max_attempts=2, timeout_seconds=5)

        response = await resilient_search("gpu prices", operation, policy=policy, sleep=_no_sleep)

        assert response.message == TIMEOUT_MESSAGE
        assert response.error is not None
        assert 'The search for "gpu prices" timed out' in response.error
        assert len(operation.calls) == 2

    @pytest.mark.asyncio
    async def test_other_failure_degrades(self) -> None:
        """Anything else becomes a tool error naming the service."""
        operation = _failing(ValueError("bad response"))

        response = await resilient_search(
            "gpu prices", operation, service="exa_search", sleep=_no_sleep
        )

        assert response.message == FAILURE_MESSAGE
        assert response.error is not None
        assert "exa_search" in response.error
