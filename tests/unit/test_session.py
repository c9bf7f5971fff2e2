"""End-to-end tests for OrchestratorSession."""

from __future__ import annotations

import json
from collections.abc import Callable

import pytest
from pydantic_ai.models.function import FunctionModel
from pydantic_ai.models.test import TestModel

from research_orchestrator import (
    MissingArtifact,
    OrchestratorSession,
    OrchestratorSettings,
    SubAgentSpec,
    TaskResult,
    default_subagents,
    planner_paths,
)
from research_orchestrator.subagents.config import PLANNER_AGENT
from research_orchestrator.subagents.unit import AgentExecutionUnit

TOPIC = "NVIDIA Stock"


def _specs(planner: FunctionModel) -> list[SubAgentSpec]:
    return [
        spec.model_copy(update={"model": planner}) if spec.name == PLANNER_AGENT else spec
        for spec in default_subagents()
    ]


@pytest.fixture
def session(
    test_model: TestModel, planner_model: Callable[[str], FunctionModel]
) -> OrchestratorSession:
    """Session with a scripted planner and TestModel research and critique agents."""
    return OrchestratorSession(
        OrchestratorSettings(_env_file=None),
        subagents=_specs(planner_model(TOPIC)),
        model=test_model,
    )


class TestConstruction:
    """Session wiring."""

    def test_default_subagents_registered(self, session: OrchestratorSession) -> None:
        """Every default sub-agent gets a unit."""
        assert session.dispatcher.available == [
            "critique-agent",
            "research-agent",
            "planner-agent",
        ]

    def test_gate_from_specs(self, session: OrchestratorSession) -> None:
        """Specs flagged requires_planning are gated."""
        assert session.gate.requires_planning == {"research-agent", "critique-agent"}

    def test_caller_tools_join_catalog(self, test_model: TestModel) -> None:
        """Caller tools resolve for sub-agents that list them."""

        def tavily_search(query: str) -> str:
            """Search the web."""
            return query

        session = OrchestratorSession(
            OrchestratorSettings(_env_file=None), tools=[tavily_search], model=test_model
        )

        research = session.units["research-agent"]
        assert isinstance(research, AgentExecutionUnit)
        assert "tavily_search" in session.catalog
        assert "tavily_search" in research.tool_names

    def test_planner_directory_from_settings(self, test_model: TestModel) -> None:
        """The planner directory setting reaches the index."""
        settings = OrchestratorSettings(_env_file=None, planner={"directory": "/plans"})
        session = OrchestratorSession(settings, model=test_model)
        assert session.index.pointer_path == "/plans/current_paths.json"


class TestPlanningFlow:
    """Planning followed by gated research."""

    @pytest.mark.asyncio
    async def test_research_blocked_before_planning(self, session: OrchestratorSession) -> None:
        """Research is gated on an empty store."""
        outcome = await session.dispatch("Research revenue", "research-agent")
        assert isinstance(outcome, MissingArtifact)
        assert outcome.reason == "planner_artifacts_unavailable"

    @pytest.mark.asyncio
    async def test_plan_then_research(self, session: OrchestratorSession) -> None:
        """A planner run registers artifacts and unblocks research."""
        paths = planner_paths(TOPIC)

        message = await session.run_task(f"Plan research on {TOPIC}", "planner-agent")

        documents = session.state.documents
        assert paths.plan in documents
        assert paths.metadata in documents
        pointer = json.loads(documents["/research/plans/current_paths.json"])
        assert pointer["slug"] == "nvidia_stock"
        assert message.startswith(f"Planning artifacts ready for {TOPIC}")
        assert '"event": "planner_artifacts_registered"' in message

        research = await session.run_task("Research revenue growth", "research-agent")
        assert research == "sub-agent finished"

    @pytest.mark.asyncio
    async def test_dispatch_does_not_apply(self, session: OrchestratorSession) -> None:
        """dispatch returns merged documents without touching session state."""
        outcome = await session.dispatch(f"Plan research on {TOPIC}", "planner-agent")

        assert isinstance(outcome, TaskResult)
        assert outcome.documents is not None
        assert planner_paths(TOPIC).plan in outcome.documents
        assert len(session.state.documents) == 0


class TestSearch:
    """Search calls under the session's retry settings."""

    @pytest.mark.asyncio
    async def test_retry_settings_applied(self, test_model: TestModel) -> None:
        """Attempts follow settings.retry before degrading."""
        settings = OrchestratorSettings(
            _env_file=None, retry={"max_attempts": 2, "initial_delay_seconds": 0}
        )
        session = OrchestratorSession(settings, model=test_model)
        calls: list[int] = []

        async def failing_search() -> list[dict[str, str]]:
            calls.append(1)
            raise RuntimeError("upstream unavailable")

        response = await session.search("EV batteries", failing_search, service="tavily")

        assert len(calls) == 2
        assert response.degraded is True
        assert response.results == []

    @pytest.mark.asyncio
    async def test_results_returned(self, session: OrchestratorSession) -> None:
        """A successful call passes its results through."""

        async def search() -> list[dict[str, str]]:
            return [{"title": "Battery outlook"}]

        response = await session.search("EV batteries", search)

        assert response.degraded is False
        assert response.results == [{"title": "Battery outlook"}]
        assert response.message == "Found 1 results for: EV batteries"


class TestLifecycle:
    """Closing sessions."""

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, session: OrchestratorSession) -> None:
        """Leaving the context closes the session."""
        async with session as active:
            assert active.closed is False
        assert session.closed is True
        assert session.units == {}

    @pytest.mark.asyncio
    async def test_closed_session_rejects_dispatch(self, session: OrchestratorSession) -> None:
        """Dispatching on a closed session raises."""
        session.close()
        session.close()

        with pytest.raises(RuntimeError, match="closed"):
            await session.run_task("Plan", "planner-agent")
        with pytest.raises(RuntimeError, match="closed"):
            await session.dispatch("Plan", "planner-agent")

    @pytest.mark.asyncio
    async def test_closed_session_rejects_search(self, session: OrchestratorSession) -> None:
        """Searching on a closed session raises."""
        session.close()

        async def search() -> list[dict[str, str]]:
            return []

        with pytest.raises(RuntimeError, match="closed"):
            await session.search("EV batteries", search)
