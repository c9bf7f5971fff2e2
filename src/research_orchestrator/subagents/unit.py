"""Execution units: one runnable agent per sub-agent spec."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from pydantic_ai import Agent, Tool
from pydantic_ai.models import Model
from pydantic_ai.usage import UsageLimits

from research_orchestrator.documents.state import AgentState, ChatMessage
from research_orchestrator.subagents.config import SubAgentSpec

logger = logging.getLogger(__name__)


@runtime_checkable
class ExecutionUnit(Protocol):
    """Opaque ``invoke(state) -> state`` contract used by dispatch."""

    name: str

    async def invoke(self, state: AgentState) -> AgentState:
        """Run the sub-agent against ``state`` and return the resulting state."""
        ...


class AgentExecutionUnit:
    """Execution unit backed by a pydantic-ai ``Agent``.

    The agent is built on first invoke, so an unusable model (for example a
    missing provider key) surfaces as a dispatch failure instead of breaking
    session construction.

    Args:
        spec: Sub-agent definition.
        tools: Resolved tools for this unit.
        model: Model name or instance used when ``spec.model`` is None.
        usage_limits: Limits applied to every run.
    """

    def __init__(
        self,
        spec: SubAgentSpec,
        tools: Sequence[Tool[AgentState]],
        model: str | Model,
        usage_limits: UsageLimits | None = None,
    ) -> None:
        self.spec = spec
        self.name = spec.name
        self.tools = list(tools)
        self.model = spec.model if spec.model is not None else model
        self.usage_limits = usage_limits
        self._agent: Agent[AgentState, str] | None = None

    def __repr__(self) -> str:
        return f"AgentExecutionUnit(name={self.name!r}, tools={self.tool_names!r})"

    @property
    def tool_names(self) -> list[str]:
        return [tool.name for tool in self.tools]

    @property
    def agent(self) -> Agent[AgentState, str]:
        """The underlying pydantic-ai agent, built on first access."""
        if self._agent is None:
            self._agent = Agent(
                self.model,
                deps_type=AgentState,
                output_type=str,
                system_prompt=self.spec.system_prompt,
                tools=self.tools,
                name=self.name,
            )
        return self._agent

    async def invoke(self, state: AgentState) -> AgentState:
        """Run the agent on the last user message in ``state``.

        Tools mutate ``state`` directly. The final output is appended as an
        assistant message.
        """
        prompt = next(
            (message.content for message in reversed(state.messages) if message.role == "user"),
            "",
        )
        result = await self.agent.run(prompt, deps=state, usage_limits=self.usage_limits)
        logger.debug("Sub-agent %s finished with %d chars", self.name, len(result.output))
        state.messages.append(ChatMessage(role="assistant", content=result.output))
        return state
