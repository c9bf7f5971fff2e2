"""Built-in tool catalog and search resilience helpers.

Functions:
    builtin_tools: File, todo and planner tools every session provides.
    resilient_search: Retry a search call and degrade to an empty result.
"""

from __future__ import annotations

from pydantic_ai import Tool

from research_orchestrator.documents.state import AgentState
from research_orchestrator.documents.tools import filesystem_tools
from research_orchestrator.planner.paths import MAX_SLUG_LENGTH, PLANNER_DIR
from research_orchestrator.planner.tools import planner_tools
from research_orchestrator.tools.search import SearchResponse, resilient_search


def builtin_tools(
    planner_directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> list[Tool[AgentState]]:
    """Return the file and todo tools followed by the planner tools."""
    return [*filesystem_tools(), *planner_tools(planner_directory, max_slug_length)]


__all__ = [
    "SearchResponse",
    "builtin_tools",
    "resilient_search",
]
