"""Long-lived owner of everything one conversation's orchestration needs.

A session is created by the caller and passed where needed. It holds the
settings, tool catalog, execution units, dependency gate, dispatcher, and the
conversation's agent state. There is no process-wide state.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from types import TracebackType
from typing import Any

from pydantic_ai import Tool
from pydantic_ai.models import Model
from pydantic_ai.usage import UsageLimits

from research_orchestrator.config.settings import OrchestratorSettings
from research_orchestrator.documents.state import AgentState
from research_orchestrator.planner.registry import PlannerArtifactIndex
from research_orchestrator.subagents.config import PLANNER_AGENT, SubAgentSpec
from research_orchestrator.subagents.defaults import default_subagents
from research_orchestrator.subagents.dispatch import TaskDispatcher, TaskResult, make_task_tool
from research_orchestrator.subagents.factory import SubagentFactory, ToolLike, build_tool_catalog
from research_orchestrator.subagents.gate import DependencyGate, MissingArtifact
from research_orchestrator.tools import builtin_tools
from research_orchestrator.tools.search import SearchResponse, resilient_search

logger = logging.getLogger(__name__)


class OrchestratorSession:
    """Wires sub-agents, the dependency gate and dispatch for one conversation.

    Example::

        async with OrchestratorSession(tools=[tavily_search]) as session:
            agent = build_orchestrator_agent(session)
            result = await agent.run("Research NVIDIA stock", deps=session.state)

    Args:
        settings: Session settings. Defaults to ``OrchestratorSettings()``.
        subagents: Sub-agent specs. Defaults to ``default_subagents()``.
        tools: Caller-supplied tools added to the built-in catalog.
        model: Default model, overriding ``settings.model``.
        state: Initial conversation state.
    """

    def __init__(
        self,
        settings: OrchestratorSettings | None = None,
        *,
        subagents: Sequence[SubAgentSpec] | None = None,
        tools: Iterable[ToolLike] | None = None,
        model: str | Model | None = None,
        state: AgentState | None = None,
    ) -> None:
        self.settings = settings or OrchestratorSettings()
        self.specs = list(subagents) if subagents is not None else default_subagents()
        self.state = state or AgentState()

        planner = self.settings.planner
        self.catalog = build_tool_catalog(
            builtin_tools(planner.directory, planner.max_slug_length),
            tools,
        )
        self.default_model = model if model is not None else self.settings.model
        self.factory = SubagentFactory(
            self.catalog,
            default_model=self.default_model,
            usage_limits=UsageLimits(request_limit=self.settings.recursion_limit),
        )
        self.units = self.factory.build_all(self.specs)

        self.index = PlannerArtifactIndex(planner.directory)
        self.gate = DependencyGate(
            [spec.name for spec in self.specs if spec.requires_planning],
            self.index,
            planner_name=PLANNER_AGENT,
        )
        self.dispatcher = TaskDispatcher(self.units, self.gate, self.index)
        self._closed = False
        logger.info("Session ready with sub-agents: %s", ", ".join(self.units))

    def __repr__(self) -> str:
        return (
            f"OrchestratorSession(subagents={list(self.units)!r}, "
            f"documents={len(self.state.documents)}, closed={self._closed})"
        )

    async def __aenter__(self) -> OrchestratorSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release execution units. Further dispatches are rejected."""
        if self._closed:
            return
        self.units.clear()
        self.dispatcher.units.clear()
        self._closed = True
        logger.debug("Session closed")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("OrchestratorSession is closed")

    async def dispatch(self, description: str, subagent_name: str) -> TaskResult | MissingArtifact:
        """Dispatch against the session's state without applying the result.

        Raises:
            RuntimeError: If the session is closed.
        """
        self._ensure_open()
        return await self.dispatcher.dispatch(description, subagent_name, self.state)

    async def run_task(self, description: str, subagent_name: str) -> str:
        """Dispatch against the session's state and apply the merged documents.

        Raises:
            RuntimeError: If the session is closed.
        """
        self._ensure_open()
        return await self.dispatcher.run_task(description, subagent_name, self.state)

    def task_tool(self) -> Tool[AgentState]:
        """The ``task`` tool bound to this session's dispatcher."""
        return make_task_tool(self.dispatcher, self.specs)

    async def search(
        self,
        query: str,
        operation: Callable[[], Awaitable[Sequence[dict[str, Any]]]],
        *,
        service: str = "search",
    ) -> SearchResponse:
        """Run a search call under the session's retry settings.

        Raises:
            RuntimeError: If the session is closed.
        """
        self._ensure_open()
        return await resilient_search(query, operation, service=service, policy=self.settings.retry)
