#!/usr/bin/env python3
"""Resilient search tool example.

This example demonstrates:
- Wrapping a flaky search call with retries and per-attempt timeouts
- Degraded results when the service keeps failing
- Registering the wrapped search as a sub-agent tool

No API key is needed: the search service is simulated.
"""

import asyncio
import random

from research_orchestrator import OrchestratorSession, RetryPolicy
from research_orchestrator.errors import RateLimitError
from research_orchestrator.tools import resilient_search

POLICY = RetryPolicy(max_attempts=3, initial_delay_seconds=0.1, timeout_seconds=2)


async def flaky_service(query: str) -> list[dict]:
    if random.random() < 0.5:
        raise RateLimitError("demo-search", retry_after=1)
    return [{"title": f"Result for {query}", "url": "https://example.com"}]


async def tavily_search(query: str) -> str:
    """Search the web for a query.

    Args:
        query: What to search for.
    """
    response = await resilient_search(
        query,
        lambda: flaky_service(query),
        service="tavily_search",
        policy=POLICY,
    )
    return response.model_dump_json(indent=2)


async def main():
    # Example 1: direct call
    print("--- Example 1: Direct Call ---\n")
    print(await tavily_search("EV battery recycling"))

    # Example 2: persistent failure degrades instead of raising
    print("\n--- Example 2: Degraded Result ---\n")

    async def always_limited() -> list[dict]:
        raise RateLimitError("demo-search")

    response = await resilient_search("anything", always_limited, policy=POLICY)
    print(f"degraded={response.degraded} message={response.message}")

    # Example 3: the research sub-agent resolves the tool by name
    print("\n--- Example 3: Session Catalog ---\n")
    session = OrchestratorSession(tools=[tavily_search])
    print(f"Catalog: {', '.join(session.catalog)}")


if __name__ == "__main__":
    asyncio.run(main())
