"""Dependency gate blocking artifact-dependent sub-agents until planning exists."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from research_orchestrator.planner.registry import PlannerArtifactIndex
from research_orchestrator.subagents.config import PLANNER_AGENT

logger = logging.getLogger(__name__)

UNAVAILABLE_REASON = "planner_artifacts_unavailable"


class MissingArtifact(BaseModel):
    """Structured error telling the orchestrating model to (re-)run planning.

    Serializes either ``{error, pointerPath, reason, hint}`` when no planning
    entry resolves, or ``{error, slug, pointerPath, missing, hint}`` when the
    entry's artifacts are absent.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: Literal["MissingArtifact"] = "MissingArtifact"
    slug: str | None = None
    pointer_path: str
    reason: str | None = None
    missing: list[str] | None = None
    hint: str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class DependencyGate:
    """Checks planner artifacts before dispatching to dependent sub-agents.

    Args:
        requires_planning: Names of sub-agents that need planner artifacts.
        index: Planner registry/pointer reader.
        planner_name: Sub-agent named in hints as the one to invoke.
    """

    def __init__(
        self,
        requires_planning: Iterable[str],
        index: PlannerArtifactIndex | None = None,
        planner_name: str = PLANNER_AGENT,
    ) -> None:
        self.requires_planning = frozenset(requires_planning)
        self.index = index or PlannerArtifactIndex()
        self.planner_name = planner_name

    def __repr__(self) -> str:
        return f"DependencyGate(requires_planning={sorted(self.requires_planning)!r})"

    def check(self, subagent_name: str, documents: Mapping[str, str]) -> MissingArtifact | None:
        """Return None if dispatch may proceed, else a ``MissingArtifact``."""
        if subagent_name not in self.requires_planning:
            return None

        entry = self.index.resolve_active_entry(documents)
        if entry is None:
            logger.warning("Blocked '%s': no planner artifacts registered", subagent_name)
            return MissingArtifact(
                pointer_path=self.index.pointer_path,
                reason=UNAVAILABLE_REASON,
                hint=(
                    f"Invoke {self.planner_name} with the task tool to regenerate "
                    "planning artifacts before continuing."
                ),
            )

        missing = self.index.missing_artifacts(documents, entry)
        if missing:
            logger.warning(
                "Blocked '%s': planner artifacts for '%s' missing: %s",
                subagent_name,
                entry.slug,
                ", ".join(missing),
            )
            return MissingArtifact(
                slug=entry.slug,
                pointer_path=self.index.pointer_path,
                missing=missing,
                hint=(
                    f"Re-run {self.planner_name} to regenerate the missing files "
                    "before dispatching research or critique tasks."
                ),
            )
        return None
