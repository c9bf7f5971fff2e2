"""Task dispatch: the single delegation operation exposed to the orchestrating agent.

Dispatch resolves the sub-agent, runs the dependency gate, invokes the unit on
a fork of the parent state, overlays the result onto the parent's
documents, and refreshes the planner registry after planning runs. Every
failure becomes a returned value; nothing raises out of ``dispatch``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_ai import RunContext, Tool

from research_orchestrator.documents.state import AgentState, ChatMessage
from research_orchestrator.documents.store import DocumentStore, merge_documents
from research_orchestrator.planner.registry import PlannerArtifactIndex
from research_orchestrator.subagents.config import PLANNER_AGENT, SubAgentSpec
from research_orchestrator.subagents.errors import SubagentDelegationError, SubagentNotFoundError
from research_orchestrator.subagents.gate import DependencyGate, MissingArtifact
from research_orchestrator.subagents.unit import ExecutionUnit

logger = logging.getLogger(__name__)

EMPTY_RESULT_PLACEHOLDER = "Task completed"
CONTENT_PREVIEW_LENGTH = 200

TASK_DESCRIPTION_PREFIX = """Launch a new agent to handle complex, multi-step tasks autonomously.

Available agent types and the tools they have access to:
"""

TASK_DESCRIPTION_SUFFIX = """
When using the task tool, set subagent_type to select which agent type to use.

Usage notes:
1. Each agent invocation is stateless apart from the shared files. Your description
   must be a detailed, self-contained task.
2. The agent's result is not visible to the user. Summarize it yourself.
3. If a MissingArtifact error comes back, invoke planner-agent first."""


class PlannerArtifactsRegistered(BaseModel):
    """Event emitted after a planning run registers artifacts."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event: Literal["planner_artifacts_registered"] = "planner_artifacts_registered"
    pointer_path: str
    registry_path: str
    slug: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


@dataclass
class TaskResult:
    """Outcome of a dispatch that reached (or tried to reach) a sub-agent.

    Attributes:
        message: Result text, or a descriptive error.
        documents: Merged documents. None when nothing should be applied.
        success: Whether the sub-agent ran to completion.
        events: Events to surface after the result text.
    """

    message: str
    documents: dict[str, str] | None = None
    success: bool = True
    events: list[PlannerArtifactsRegistered] = field(default_factory=list)

    def render(self) -> str:
        """Render the result text followed by any events as JSON."""
        return "\n\n".join([self.message, *(event.to_json() for event in self.events)])


class TaskDispatcher:
    """Dispatches tasks to registered execution units.

    Dispatches run strictly one at a time through ``run_task``, since each one
    reads and writes the shared document store.

    Args:
        units: Execution units keyed by sub-agent name.
        gate: Dependency gate for artifact-dependent sub-agents.
        index: Planner registry reader/writer.
        planner_name: Sub-agent whose runs refresh the planner registry.
    """

    def __init__(
        self,
        units: Mapping[str, ExecutionUnit],
        gate: DependencyGate,
        index: PlannerArtifactIndex | None = None,
        planner_name: str = PLANNER_AGENT,
    ) -> None:
        self.units = dict(units)
        self.gate = gate
        self.index = index or gate.index
        self.planner_name = planner_name
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"TaskDispatcher(units={self.available!r})"

    @property
    def available(self) -> list[str]:
        """Registered sub-agent names in registration order."""
        return list(self.units)

    async def dispatch(
        self,
        description: str,
        subagent_name: str,
        parent: AgentState | Mapping[str, str],
    ) -> TaskResult | MissingArtifact:
        """Run one task on a named sub-agent.

        The sub-agent works on a fork of the parent state: a copy of its
        documents and todos plus a single user message. ``parent`` is never
        mutated.

        Args:
            description: Self-contained task for the sub-agent.
            subagent_name: Registered sub-agent name.
            parent: Caller state, or just the documents visible to the caller.

        Returns:
            ``MissingArtifact`` when the gate blocks, otherwise a ``TaskResult``.
            Unknown names and run failures yield an unsuccessful ``TaskResult``
            with no documents.
        """
        parent_state = _as_state(parent)
        parent_documents = parent_state.documents

        unit = self.units.get(subagent_name)
        if unit is None:
            error = SubagentNotFoundError(subagent_name, self.available)
            logger.warning("%s", error)
            return TaskResult(message=f"Error: {error}", success=False)

        blocked = self.gate.check(subagent_name, parent_documents)
        if blocked is not None:
            return blocked

        state = parent_state.fork([ChatMessage(role="user", content=description)])
        try:
            result_state = await unit.invoke(state)
            return self._collect(subagent_name, parent_documents, result_state)
        except Exception as exc:
            error = SubagentDelegationError(subagent_name, description, exc)
            logger.error("%s", error, exc_info=exc)
            return TaskResult(message=str(error), success=False)

    def _collect(
        self,
        subagent_name: str,
        parent_documents: Mapping[str, str],
        result_state: AgentState,
    ) -> TaskResult:
        """Merge a finished run into the parent's documents and extract its reply."""
        child_documents = result_state.documents or {}
        logger.debug(
            "[%s] parent has %d documents, sub-agent returned %d",
            subagent_name,
            len(parent_documents),
            len(child_documents),
        )
        merged = merge_documents(parent_documents, child_documents)
        planner_files = [path for path in merged if path.startswith(f"{self.index.directory}/")]
        if planner_files:
            logger.debug("[%s] planner documents after merge: %s", subagent_name, planner_files)

        events: list[PlannerArtifactsRegistered] = []
        if subagent_name == self.planner_name:
            entry = self.index.apply_update(parent_documents, merged)
            if entry is not None:
                missing = self.index.missing_artifacts(merged, entry)
                if missing:
                    logger.warning(
                        "[%s] expected artifacts not found after execution: %s",
                        subagent_name,
                        ", ".join(missing),
                    )
                events.append(
                    PlannerArtifactsRegistered(
                        pointer_path=self.index.pointer_path,
                        registry_path=self.index.registry_path,
                        slug=entry.slug,
                    )
                )

        message = _last_message_text(result_state.messages)
        if message:
            logger.debug(
                "[%s] returned %d chars: %s",
                subagent_name,
                len(message),
                message[:CONTENT_PREVIEW_LENGTH],
            )
        else:
            logger.warning("[%s] returned empty content", subagent_name)

        return TaskResult(
            message=message or EMPTY_RESULT_PLACEHOLDER,
            documents=merged,
            events=events,
        )

    async def run_task(self, description: str, subagent_name: str, state: AgentState) -> str:
        """Dispatch against ``state`` and apply the merged documents to it.

        Calls are serialized so concurrent tool calls never interleave their
        store reads and writes.

        Returns:
            Text for the orchestrating model: the result, the rendered error,
            or the ``MissingArtifact`` JSON.
        """
        async with self._lock:
            outcome = await self.dispatch(description, subagent_name, state)
            if isinstance(outcome, MissingArtifact):
                return outcome.to_json()
            if outcome.documents is not None:
                state.documents.merge(outcome.documents)
            return outcome.render()


def _as_state(parent: AgentState | Mapping[str, str]) -> AgentState:
    if isinstance(parent, AgentState):
        return parent
    return AgentState(documents=DocumentStore(parent))


def _last_message_text(messages: list[ChatMessage] | None) -> str:
    return messages[-1].content if messages else ""


def task_tool_description(specs: list[SubAgentSpec]) -> str:
    """Describe the task tool, enumerating sub-agents as ``- name: description``."""
    listing = "\n".join(f"- {spec.name}: {spec.description}" for spec in specs)
    return f"{TASK_DESCRIPTION_PREFIX}{listing}\n{TASK_DESCRIPTION_SUFFIX}"


def make_task_tool(dispatcher: TaskDispatcher, specs: list[SubAgentSpec]) -> Tool[AgentState]:
    """Build the ``task`` tool the orchestrating agent delegates through."""

    async def task(ctx: RunContext[AgentState], description: str, subagent_type: str) -> str:
        """Delegate a task to a sub-agent.

        Args:
            description: Detailed, self-contained task for the sub-agent.
            subagent_type: Name of the sub-agent to use.
        """
        return await dispatcher.run_task(description, subagent_type, ctx.deps)

    return Tool(task, takes_ctx=True, description=task_tool_description(specs))
