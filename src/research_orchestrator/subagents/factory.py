"""Builds one execution unit per sub-agent spec, resolving tools by name."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from pydantic_ai import Tool
from pydantic_ai.models import Model
from pydantic_ai.usage import UsageLimits

from research_orchestrator.documents.state import AgentState
from research_orchestrator.subagents.config import SubAgentSpec
from research_orchestrator.subagents.unit import AgentExecutionUnit, ExecutionUnit

logger = logging.getLogger(__name__)

ToolLike = Tool[AgentState] | Callable[..., Any]


def build_tool_catalog(
    builtins: Iterable[Tool[AgentState]],
    extra: Iterable[ToolLike] | None = None,
) -> dict[str, Tool[AgentState]]:
    """Combine built-in and caller-supplied tools into a name-keyed catalog.

    Caller-supplied tools win on name collisions. Plain callables are wrapped
    in a ``Tool`` named after the function.
    """
    catalog = {tool.name: tool for tool in builtins}
    for item in extra or ():
        tool = item if isinstance(item, Tool) else Tool(item)
        catalog[tool.name] = tool
    return catalog


class SubagentFactory:
    """Creates execution units for sub-agent specs.

    Construction never fails: unknown tool names are logged and omitted.

    Example::

        factory = SubagentFactory(catalog, default_model="openai:gpt-4o-mini")
        units = factory.build_all(default_subagents())

    Args:
        catalog: Tool catalog keyed by tool name.
        default_model: Model for specs without an override.
        usage_limits: Limits applied to every unit run.
    """

    def __init__(
        self,
        catalog: Mapping[str, Tool[AgentState]],
        default_model: str | Model,
        usage_limits: UsageLimits | None = None,
    ) -> None:
        self._catalog = dict(catalog)
        self._default_model = default_model
        self._usage_limits = usage_limits

    @property
    def catalog(self) -> dict[str, Tool[AgentState]]:
        return dict(self._catalog)

    def resolve_tools(self, spec: SubAgentSpec) -> list[Tool[AgentState]]:
        """Resolve a spec's allow-list against the catalog.

        A spec without an allow-list gets the entire catalog.
        """
        if spec.tools is None:
            return list(self._catalog.values())

        resolved: list[Tool[AgentState]] = []
        for tool_name in spec.tools:
            tool = self._catalog.get(tool_name)
            if tool is None:
                logger.warning(
                    "Sub-agent '%s' requested unknown tool '%s'; omitting it",
                    spec.name,
                    tool_name,
                )
                continue
            resolved.append(tool)
        return resolved

    def build(self, spec: SubAgentSpec) -> ExecutionUnit:
        """Create the execution unit for one spec."""
        return AgentExecutionUnit(
            spec,
            self.resolve_tools(spec),
            self._default_model,
            usage_limits=self._usage_limits,
        )

    def build_all(self, specs: Sequence[SubAgentSpec]) -> dict[str, ExecutionUnit]:
        """Create units for every spec, keyed by name in declaration order.

        A later spec with a duplicate name replaces the earlier one.
        """
        units: dict[str, ExecutionUnit] = {}
        for spec in specs:
            if spec.name in units:
                logger.warning("Duplicate sub-agent '%s'; keeping the last definition", spec.name)
            units[spec.name] = self.build(spec)
        logger.debug("Built %d sub-agent units: %s", len(units), ", ".join(units))
        return units
