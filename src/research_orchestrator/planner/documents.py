"""Planner document schemas and the initial plan builder.

All planner documents are stored as camelCase JSON. Each document type has a
single schema-validated decode, so read sites never parse JSON by hand.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from research_orchestrator.planner.paths import PlannerPaths

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)

DEFAULT_WORKFLOW: tuple[str, ...] = (
    "Review topic analysis",
    "Execute scoped research tasks",
    "Synthesize findings",
    "Draft final report",
    "Request critique and iterate",
)


class PlannerDocument(BaseModel):
    """Base for planner documents serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        """Serialize as indented camelCase JSON."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class TopicAnalysis(PlannerDocument):
    """Classification of a research topic."""

    topic: str
    context: str | None = None
    topic_type: str
    complexity: str
    research_areas: list[str] = Field(default_factory=list)
    suggested_sources: list[str] = Field(default_factory=list)
    estimated_timeframe: str = ""
    timestamp: str


class ResearchTask(PlannerDocument):
    """One scoped unit of research work."""

    area: str
    estimated_time: float
    priority: Literal["high", "medium", "low"]


class ScopeEstimate(PlannerDocument):
    """Time, task and resource estimate for a research topic."""

    topic: str
    estimated_total_hours: float
    research_tasks: list[ResearchTask] = Field(default_factory=list)
    suggested_milestones: list[str] = Field(default_factory=list)
    resource_requirements: dict[str, Any] = Field(default_factory=dict)
    timestamp: str


class OptimizedPlan(PlannerDocument):
    """A plan task list after feedback, reordering and gap review."""

    topic: str
    original_plan: list[str]
    optimized_plan: list[str]
    identified_gaps: list[str] = Field(default_factory=list)
    suggestions_for_improvement: list[str] = Field(default_factory=list)
    estimated_improvement: str
    user_feedback: str | None = None
    timestamp: str


class PlanMetadata(PlannerDocument):
    slug: str
    created_at: str
    truncated_slug: bool
    paths: PlannerPaths


class PlanSummary(PlannerDocument):
    context: str
    topic_type: str
    complexity: str
    estimated_timeframe: str


class InitialPlan(PlannerDocument):
    """Structured research plan combining analysis and scope."""

    topic: str
    metadata: PlanMetadata
    summary: PlanSummary
    research_areas: list[str]
    suggested_sources: list[str]
    workflow: list[str]
    tasks: list[ResearchTask]
    milestones: list[str]
    resources: dict[str, Any]


def utc_now() -> str:
    """Return the current time as an ISO-8601 UTC string."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def decode_document(content: str | None, model: type[DocumentT]) -> DocumentT | None:
    """Decode a JSON document against a schema.

    Args:
        content: Raw document content, or None if the document is absent.
        model: Pydantic model describing the document.

    Returns:
        The validated model, or None if absent, not JSON, or invalid.
    """
    if content is None:
        return None
    try:
        return model.model_validate_json(content)
    except ValidationError as exc:
        logger.debug("Document failed %s validation: %s", model.__name__, exc.error_count())
        return None


def synthesize_workflow(analysis: TopicAnalysis, scope: ScopeEstimate) -> list[str]:
    """Build the ordered workflow steps for a plan.

    High-priority tasks become "Deep dive" steps after the first default step.
    Analysis areas that no scoped task covers get a trailing validation step.
    """
    covered = {task.area for task in scope.research_tasks}
    coverage_validation = [
        f"Validate coverage for {area}" for area in analysis.research_areas if area not in covered
    ]

    deep_dives = list(
        dict.fromkeys(
            f"Deep dive on {task.area}" for task in scope.research_tasks if task.priority == "high"
        )
    )
    if not deep_dives:
        return [*DEFAULT_WORKFLOW, *coverage_validation]

    return [DEFAULT_WORKFLOW[0], *deep_dives, *DEFAULT_WORKFLOW[1:], *coverage_validation]


def build_initial_plan(
    paths: PlannerPaths,
    analysis: TopicAnalysis,
    scope: ScopeEstimate,
    *,
    created_at: str | None = None,
) -> InitialPlan:
    """Combine a topic analysis and scope estimate into an initial plan.

    Args:
        paths: Canonical planner paths for the topic.
        analysis: Topic analysis document.
        scope: Scope estimate document.
        created_at: Creation timestamp. Defaults to now.

    Returns:
        The assembled ``InitialPlan``.
    """
    return InitialPlan(
        topic=analysis.topic,
        metadata=PlanMetadata(
            slug=paths.slug,
            created_at=created_at or utc_now(),
            truncated_slug=paths.truncated,
            paths=paths,
        ),
        summary=PlanSummary(
            context=analysis.context or "",
            topic_type=analysis.topic_type,
            complexity=analysis.complexity,
            estimated_timeframe=analysis.estimated_timeframe,
        ),
        research_areas=list(analysis.research_areas),
        suggested_sources=list(analysis.suggested_sources),
        workflow=synthesize_workflow(analysis, scope),
        tasks=list(scope.research_tasks),
        milestones=list(scope.suggested_milestones),
        resources=dict(scope.resource_requirements),
    )
