"""Planner sub-agent tools.

``topic_analysis`` and ``scope_estimation`` write the per-topic analysis and
scope documents. ``compose_plan`` turns those into an initial plan, then writes
the per-topic metadata document the registry update consumes after the
planning run. ``plan_optimization`` refines a plan's task list afterwards.
"""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_ai import RunContext, Tool

from research_orchestrator.documents.state import AgentState
from research_orchestrator.planner.documents import (
    InitialPlan,
    PlannerDocument,
    ScopeEstimate,
    TopicAnalysis,
    build_initial_plan,
    decode_document,
    utc_now,
)
from research_orchestrator.planner.estimates import analyze_topic, estimate_scope, optimize_plan
from research_orchestrator.planner.paths import MAX_SLUG_LENGTH, PLANNER_DIR, planner_paths
from research_orchestrator.planner.registry import PlannerPathsRecord

logger = logging.getLogger(__name__)


class ComposedPlanMetadata(PlannerDocument):
    """Metadata document written alongside a composed plan."""

    topic: str
    context: str | None = None
    original_slug: str
    truncated: bool
    warnings: list[str] = Field(default_factory=list)
    paths: PlannerPathsRecord
    timestamps: dict[str, str] = Field(default_factory=dict)
    artifacts: dict[str, bool] = Field(default_factory=dict)


def make_compose_plan(
    directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> Tool[AgentState]:
    """Build the ``compose_plan`` tool bound to a planner directory.

    Args:
        directory: Directory prefix for planner documents.
        max_slug_length: Maximum slug length for derived paths.

    Returns:
        A pydantic-ai ``Tool`` named ``compose_plan``.
    """

    def compose_plan(
        ctx: RunContext[AgentState],
        topic: str,
        context: str | None = None,
    ) -> str:
        """Compose the initial research plan from the saved topic analysis and scope.

        Run topic_analysis and scope_estimation first; their documents must exist.

        Args:
            topic: The research topic being planned.
            context: Additional context about the research request.
        """
        documents = ctx.deps.documents
        paths = planner_paths(topic, directory=directory, max_length=max_slug_length)

        analysis = decode_document(documents.get(paths.analysis), TopicAnalysis)
        if analysis is None:
            return (
                f"Error: Topic analysis not found or invalid at {paths.analysis}. "
                "Run topic_analysis before composing the plan."
            )
        scope = decode_document(documents.get(paths.scope), ScopeEstimate)
        if scope is None:
            return (
                f"Error: Scope estimate not found or invalid at {paths.scope}. "
                "Run scope_estimation before composing the plan."
            )

        created_at = utc_now()
        plan = build_initial_plan(paths, analysis, scope, created_at=created_at)
        documents.write(paths.plan, plan.to_json())

        warnings: list[str] = []
        if paths.truncated:
            warnings.append(
                f"Topic slug truncated from {len(paths.original_slug)} "
                f"to {paths.max_length} characters"
            )

        metadata = ComposedPlanMetadata(
            topic=topic,
            context=context if context is not None else analysis.context,
            original_slug=paths.original_slug,
            truncated=paths.truncated,
            warnings=warnings,
            paths=PlannerPathsRecord(
                slug=paths.slug,
                dir=paths.dir,
                analysis=paths.analysis,
                scope=paths.scope,
                plan=paths.plan,
                optimized=paths.optimized,
                metadata=paths.metadata,
            ),
            timestamps={
                "analysis": analysis.timestamp,
                "scope": scope.timestamp,
                "plan": created_at,
            },
            artifacts={
                "analysis": True,
                "scope": True,
                "plan": True,
                "optimized": paths.optimized in documents,
            },
        )
        documents.write(paths.metadata, metadata.to_json())
        logger.info("Composed plan for '%s' at %s", paths.slug, paths.plan)

        steps = "\n".join(f"{index}. {step}" for index, step in enumerate(plan.workflow, 1))
        return (
            f"Initial plan saved to {paths.plan}\n\n"
            f"Workflow:\n{steps}\n\n"
            f"Planner metadata saved to {paths.metadata}"
        )

    return Tool(compose_plan, takes_ctx=True)


def make_topic_analysis(
    directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> Tool[AgentState]:
    """Build the ``topic_analysis`` tool bound to a planner directory."""

    def topic_analysis(
        ctx: RunContext[AgentState],
        topic: str,
        context: str | None = None,
    ) -> str:
        """Classify a research topic and save the analysis.

        Use this at the start of every new research task. The analysis records
        the topic type, complexity, research areas, suggested sources and an
        estimated timeframe.

        Args:
            topic: The research topic to analyze.
            context: Additional context about the research request.
        """
        paths = planner_paths(topic, directory=directory, max_length=max_slug_length)
        analysis = analyze_topic(topic, context)
        ctx.deps.documents.write(paths.analysis, analysis.to_json())
        logger.info(
            "Analyzed '%s' as %s/%s", paths.slug, analysis.topic_type, analysis.complexity
        )
        return (
            f"Topic analysis completed and saved to {paths.analysis}\n\n"
            "Analysis Summary:\n"
            f"- Topic Type: {analysis.topic_type}\n"
            f"- Complexity: {analysis.complexity}\n"
            f"- Estimated Timeframe: {analysis.estimated_timeframe}\n"
            f"- Research Areas: {', '.join(analysis.research_areas)}\n\n"
            f"Use read_file on {paths.analysis} for the full analysis."
        )

    return Tool(topic_analysis, takes_ctx=True)


def make_scope_estimation(
    directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> Tool[AgentState]:
    """Build the ``scope_estimation`` tool bound to a planner directory."""

    def scope_estimation(
        ctx: RunContext[AgentState],
        topic: str,
        topic_type: str | None = None,
        complexity: str | None = None,
        research_areas: list[str] | None = None,
    ) -> str:
        """Estimate hours, tasks, milestones and resources for a research topic.

        Run topic_analysis first. Omitted arguments are taken from the saved
        topic analysis.

        Args:
            topic: The research topic.
            topic_type: technical, academic, business, creative or general.
            complexity: low, medium or high.
            research_areas: Key areas that need research.
        """
        documents = ctx.deps.documents
        paths = planner_paths(topic, directory=directory, max_length=max_slug_length)

        if topic_type is None or complexity is None or research_areas is None:
            analysis = decode_document(documents.get(paths.analysis), TopicAnalysis)
            if analysis is None:
                return (
                    f"Error: Topic analysis not found or invalid at {paths.analysis}. "
                    "Run topic_analysis or pass topic_type, complexity and research_areas."
                )
            topic_type = topic_type or analysis.topic_type
            complexity = complexity or analysis.complexity
            research_areas = (
                research_areas if research_areas is not None else analysis.research_areas
            )

        scope = estimate_scope(topic, topic_type, complexity, research_areas)
        documents.write(paths.scope, scope.to_json())
        logger.info("Estimated scope for '%s': %s hours", paths.slug, scope.estimated_total_hours)
        return (
            f"Scope estimation completed and saved to {paths.scope}\n\n"
            "Scope Summary:\n"
            f"- Estimated Total Hours: {scope.estimated_total_hours:g}\n"
            f"- Research Tasks: {len(scope.research_tasks)} tasks\n"
            f"- Milestones: {len(scope.suggested_milestones)}\n\n"
            f"Use read_file on {paths.scope} for the full scope."
        )

    return Tool(scope_estimation, takes_ctx=True)


def make_plan_optimization(
    directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> Tool[AgentState]:
    """Build the ``plan_optimization`` tool bound to a planner directory."""

    def plan_optimization(
        ctx: RunContext[AgentState],
        topic: str,
        current_plan: list[str] | None = None,
        user_feedback: str | None = None,
    ) -> str:
        """Refine a research plan using feedback and the saved topic analysis.

        Feedback asking for "more detail" expands every task and feedback asking
        for "less" drops tasks. Research areas no task mentions are reported as gaps.

        Args:
            topic: The research topic.
            current_plan: Plan tasks in order. Defaults to the saved plan's workflow.
            user_feedback: User feedback on the current plan.
        """
        documents = ctx.deps.documents
        paths = planner_paths(topic, directory=directory, max_length=max_slug_length)

        analysis = decode_document(documents.get(paths.analysis), TopicAnalysis)
        if analysis is None:
            return (
                f"Error: Topic analysis not found or invalid at {paths.analysis}. "
                "Run topic_analysis before optimizing the plan."
            )
        if current_plan is None:
            plan = decode_document(documents.get(paths.plan), InitialPlan)
            if plan is None:
                return (
                    f"Error: Plan not found or invalid at {paths.plan}. "
                    "Pass current_plan or run compose_plan first."
                )
            current_plan = plan.workflow

        optimized = optimize_plan(topic, current_plan, analysis, user_feedback)
        documents.write(paths.optimized, optimized.to_json())
        logger.info("Optimized plan for '%s' at %s", paths.slug, paths.optimized)
        return (
            f"Plan optimization completed and saved to {paths.optimized}\n\n"
            "Optimization Summary:\n"
            f"- Identified Gaps: {len(optimized.identified_gaps)}\n"
            f"- Suggestions: {len(optimized.suggestions_for_improvement)}\n"
            f"- Improvement: {optimized.estimated_improvement}\n\n"
            f"Use read_file on {paths.optimized} for the full optimized plan."
        )

    return Tool(plan_optimization, takes_ctx=True)


def planner_tools(
    directory: str = PLANNER_DIR,
    max_slug_length: int = MAX_SLUG_LENGTH,
) -> list[Tool[AgentState]]:
    """Return the planner sub-agent tools in workflow order."""
    return [
        make(directory, max_slug_length)
        for make in (
            make_topic_analysis,
            make_scope_estimation,
            make_compose_plan,
            make_plan_optimization,
        )
    ]
