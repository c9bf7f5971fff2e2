"""The orchestrating agent: delegates through ``task`` and shares the file tools."""

from __future__ import annotations

from pydantic_ai import Agent
from pydantic_ai.models import Model

from research_orchestrator.documents.state import AgentState
from research_orchestrator.documents.tools import filesystem_tools
from research_orchestrator.session import OrchestratorSession

DEFAULT_SYSTEM_PROMPT = """You are an expert researcher. Your job is to conduct thorough
research and then write a polished report to /final_report.md.

Plan first: delegate to planner-agent before any research-agent or critique-agent task.
Break large topics into sub-questions and give each research-agent task exactly one.
Track progress with write_todos, and use the files under /research/ as source material."""


def build_orchestrator_agent(
    session: OrchestratorSession,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    *,
    model: str | Model | None = None,
) -> Agent[AgentState, str]:
    """Build the orchestrating agent for a session.

    Run it with ``deps=session.state`` so ``task`` merges into the same store
    the file tools read.

    Args:
        session: Session owning sub-agents and dispatch.
        system_prompt: Instruction for the orchestrating agent.
        model: Model override. Defaults to the session's default model.

    Returns:
        An agent exposing ``task``, ``ls``, ``read_file``, ``write_file``,
        ``edit_file`` and ``write_todos``.
    """
    return Agent(
        model if model is not None else session.default_model,
        deps_type=AgentState,
        output_type=str,
        system_prompt=system_prompt,
        tools=[session.task_tool(), *filesystem_tools()],
        name="orchestrator",
        defer_model_check=True,
    )
