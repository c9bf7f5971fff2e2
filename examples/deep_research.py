#!/usr/bin/env python3
"""Deep research orchestration example.

This example demonstrates:
- Building a session with the default planner, research and critique sub-agents
- Running the orchestrating agent against the session state
- Inspecting the planner registry after the run

Prerequisites:
- Set OPENAI_API_KEY environment variable
"""

import asyncio
import json
import os

from research_orchestrator import (
    OrchestratorSession,
    OrchestratorSettings,
    build_orchestrator_agent,
)
from research_orchestrator.observability import setup_logging


async def main():
    if not os.environ.get("OPENAI_API_KEY"):
        print("Please set OPENAI_API_KEY environment variable")
        return

    settings = OrchestratorSettings(logging={"level": "INFO", "rich": True})
    setup_logging(settings.logging)

    async with OrchestratorSession(settings) as session:
        agent = build_orchestrator_agent(session)
        result = await agent.run(
            "Research the outlook for NVIDIA stock over the next year",
            deps=session.state,
        )
        print(f"Response: {result.output}\n")

        print("--- Documents ---")
        for path in session.state.documents.list():
            print(f"  {path}")

        # The registry records every planning run; the pointer names the active one
        pointer = session.state.documents.get("/research/plans/current_paths.json")
        if pointer:
            print(f"\nActive plan: {json.loads(pointer)['plan']}")


if __name__ == "__main__":
    asyncio.run(main())
