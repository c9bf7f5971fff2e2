"""
Research Orchestrator - sub-agent orchestration for deep research, built on pydantic-ai.

Quick Start:
    >>> from research_orchestrator import OrchestratorSession, build_orchestrator_agent
    >>> session = OrchestratorSession()
    >>> agent = build_orchestrator_agent(session)
    >>> result = agent.run_sync("Research the EV battery market", deps=session.state)

Direct dispatch:
    >>> outcome = await session.dispatch("Plan research on EV batteries", "planner-agent")

Key Features:
    - Task dispatch with parent-preserving document merge
    - Planner artifact registry and pointer for "the current plan"
    - Dependency gate returning structured MissingArtifact errors
    - Retry with per-attempt timeouts and degraded search results
"""

from research_orchestrator.config.settings import (
    LoggingConfig,
    OrchestratorSettings,
    PlannerConfig,
)
from research_orchestrator.documents import AgentState, DocumentStore, merge_documents
from research_orchestrator.errors import RetryExhaustedError, RetryPolicy, with_retry
from research_orchestrator.orchestrator import build_orchestrator_agent
from research_orchestrator.planner import PlannerArtifactIndex, derive_slug, planner_paths
from research_orchestrator.session import OrchestratorSession
from research_orchestrator.subagents import (
    DependencyGate,
    MissingArtifact,
    SubAgentSpec,
    TaskDispatcher,
    TaskResult,
    default_subagents,
)

__all__ = [
    "AgentState",
    "DependencyGate",
    "DocumentStore",
    "LoggingConfig",
    "MissingArtifact",
    "OrchestratorSession",
    "OrchestratorSettings",
    "PlannerArtifactIndex",
    "PlannerConfig",
    "RetryExhaustedError",
    "RetryPolicy",
    "SubAgentSpec",
    "TaskDispatcher",
    "TaskResult",
    "__version__",
    "build_orchestrator_agent",
    "default_subagents",
    "derive_slug",
    "merge_documents",
    "planner_paths",
    "with_retry",
]

__version__ = "0.1.0"
