"""Sub-agent subsystem: specs, execution units, the dependency gate and task dispatch.

Classes:
    SubAgentSpec: Definition of one delegatable sub-agent.
    SubagentFactory: Builds execution units, resolving tools by name.
    DependencyGate: Blocks artifact-dependent sub-agents until planning exists.
    TaskDispatcher: Runs tasks on sub-agents and merges their documents back.

Functions:
    default_subagents: The planner, research and critique specs.
    load_subagent_spec / discover_subagents: Markdown definition loading.
    make_task_tool: The ``task`` tool for the orchestrating agent.
"""

from __future__ import annotations

from research_orchestrator.subagents.config import (
    CRITIQUE_AGENT,
    PLANNER_AGENT,
    RESEARCH_AGENT,
    SubAgentSpec,
)
from research_orchestrator.subagents.defaults import default_subagents
from research_orchestrator.subagents.dispatch import (
    EMPTY_RESULT_PLACEHOLDER,
    PlannerArtifactsRegistered,
    TaskDispatcher,
    TaskResult,
    make_task_tool,
    task_tool_description,
)
from research_orchestrator.subagents.errors import (
    SubagentConfigError,
    SubagentDelegationError,
    SubagentError,
    SubagentNotFoundError,
)
from research_orchestrator.subagents.factory import SubagentFactory, build_tool_catalog
from research_orchestrator.subagents.gate import DependencyGate, MissingArtifact
from research_orchestrator.subagents.loader import discover_subagents, load_subagent_spec
from research_orchestrator.subagents.unit import AgentExecutionUnit, ExecutionUnit

__all__ = [
    "CRITIQUE_AGENT",
    "EMPTY_RESULT_PLACEHOLDER",
    "PLANNER_AGENT",
    "RESEARCH_AGENT",
    "AgentExecutionUnit",
    "DependencyGate",
    "ExecutionUnit",
    "MissingArtifact",
    "PlannerArtifactsRegistered",
    "SubAgentSpec",
    "SubagentConfigError",
    "SubagentDelegationError",
    "SubagentError",
    "SubagentFactory",
    "SubagentNotFoundError",
    "TaskDispatcher",
    "TaskResult",
    "build_tool_catalog",
    "default_subagents",
    "discover_subagents",
    "load_subagent_spec",
    "make_task_tool",
    "task_tool_description",
]
