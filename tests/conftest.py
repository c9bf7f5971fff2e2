"""Shared test fixtures and configuration for research-orchestrator tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest
from pydantic_ai import models
from pydantic_ai.messages import ModelMessage, ModelResponse, TextPart, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel
from pydantic_ai.models.test import TestModel

from research_orchestrator.documents.state import AgentState, ChatMessage
from research_orchestrator.planner.documents import ScopeEstimate, TopicAnalysis
from research_orchestrator.planner.paths import PlannerPaths, planner_paths
from research_orchestrator.planner.registry import PlannerArtifactIndex

# Block all real model requests globally for safety
models.ALLOW_MODEL_REQUESTS = False


class SpyUnit:
    """Execution unit double that records calls and writes fixed documents."""

    def __init__(
        self,
        name: str,
        *,
        writes: dict[str, str] | None = None,
        reply: str = "done",
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.writes = dict(writes or {})
        self.reply = reply
        self.error = error
        self.calls: list[AgentState] = []

    async def invoke(self, state: AgentState) -> AgentState:
        self.calls.append(state)
        if self.error is not None:
            raise self.error
        for path, content in self.writes.items():
            state.documents.write(path, content)
        state.messages.append(ChatMessage(role="assistant", content=self.reply))
        return state


@pytest.fixture
def test_model() -> TestModel:
    """Provide a TestModel that answers without calling tools."""
    return TestModel(call_tools=[], custom_output_text="sub-agent finished")


@pytest.fixture
def spy_unit() -> type[SpyUnit]:
    """Factory fixture for spy execution units.

    Usage:
        def test_something(spy_unit):
            unit = spy_unit("research-agent", reply="findings")
    """
    return SpyUnit


@pytest.fixture
def planner_index() -> PlannerArtifactIndex:
    """Planner index for the default ``/research/plans`` directory."""
    return PlannerArtifactIndex()


def _metadata_json(
    paths: PlannerPaths,
    *,
    topic: str,
    context: str | None = None,
    plan_timestamp: str | None = "2025-01-01T00:00:00Z",
    warnings: list[Any] | None = None,
) -> str:
    document: dict[str, Any] = {
        "topic": topic,
        "paths": {
            "slug": paths.slug,
            "dir": paths.dir,
            "analysis": paths.analysis,
            "scope": paths.scope,
            "plan": paths.plan,
            "optimized": paths.optimized,
            "metadata": paths.metadata,
        },
    }
    if context is not None:
        document["context"] = context
    if warnings is not None:
        document["warnings"] = warnings
    if plan_timestamp is not None:
        document["timestamps"] = {"plan": plan_timestamp}
    return json.dumps(document, indent=2)


@pytest.fixture
def planner_metadata() -> Callable[..., tuple[PlannerPaths, str]]:
    """Factory fixture building ``(paths, metadata_json)`` for a topic.

    Usage:
        def test_something(planner_metadata):
            paths, content = planner_metadata("NVIDIA Stock", context="Q3")
    """

    def build(topic: str, **kwargs: Any) -> tuple[PlannerPaths, str]:
        paths = planner_paths(topic)
        return paths, _metadata_json(paths, topic=topic, **kwargs)

    return build


@pytest.fixture
def planned_documents(
    planner_metadata: Callable[..., tuple[PlannerPaths, str]],
    planner_index: PlannerArtifactIndex,
) -> dict[str, str]:
    """Documents after a complete planning run for "NVIDIA Stock".

    Contains the analysis, scope, plan and metadata documents plus the
    registry and pointer documents.
    """
    paths, metadata = planner_metadata("NVIDIA Stock")
    documents = {
        paths.analysis: "{}",
        paths.scope: "{}",
        paths.plan: "{}",
        paths.metadata: metadata,
    }
    planner_index.apply_update({}, documents)
    return documents


@pytest.fixture
def planner_model() -> Callable[[str], FunctionModel]:
    """Factory for a scripted planner model.

    The model calls ``topic_analysis``, ``scope_estimation`` and
    ``compose_plan`` in turn, then replies with a summary.
    """

    def build(topic: str) -> FunctionModel:
        steps = ["topic_analysis", "scope_estimation", "compose_plan"]

        def respond(messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
            step = sum(isinstance(message, ModelResponse) for message in messages)
            if step < len(steps):
                return ModelResponse(
                    parts=[ToolCallPart(tool_name=steps[step], args={"topic": topic})]
                )
            return ModelResponse(parts=[TextPart(f"Planning artifacts ready for {topic}")])

        return FunctionModel(respond)

    return build


@pytest.fixture
def analysis_and_scope() -> Callable[[str], dict[str, str]]:
    """Factory fixture writing valid analysis and scope documents for a topic."""

    def build(topic: str) -> dict[str, str]:
        paths = planner_paths(topic)
        analysis = TopicAnalysis(
            topic=topic,
            context="Quarterly outlook",
            topic_type="business",
            complexity="medium",
            research_areas=["Market share", "Supply chain", "Regulation"],
            suggested_sources=["Company filings"],
            estimated_timeframe="4-6 hours",
            timestamp="2025-01-01T00:00:00Z",
        )
        scope = ScopeEstimate(
            topic=topic,
            estimated_total_hours=5,
            research_tasks=[
                {"area": "Market share", "estimated_time": 2, "priority": "high"},
                {"area": "Supply chain", "estimated_time": 2, "priority": "medium"},
            ],
            suggested_milestones=["Initial findings"],
            resource_requirements={"sources": 10},
            timestamp="2025-01-01T00:05:00Z",
        )
        return {paths.analysis: analysis.to_json(), paths.scope: scope.to_json()}

    return build
