"""Planner artifacts: deterministic paths, documents, and the artifact registry.

Functions:
    planner_paths: Derive canonical document paths for a topic.
    derive_slug: Normalize and truncate a topic into a slug.
    build_initial_plan: Combine analysis and scope into a plan.
    make_compose_plan: Build the ``compose_plan`` planner tool.
    planner_tools: Analysis, scope, plan and optimization tools for the planner.

Classes:
    PlannerArtifactIndex: Registry/pointer maintenance and active-entry resolution.
"""

from __future__ import annotations

from research_orchestrator.planner.documents import (
    InitialPlan,
    OptimizedPlan,
    ResearchTask,
    ScopeEstimate,
    TopicAnalysis,
    build_initial_plan,
    decode_document,
)
from research_orchestrator.planner.estimates import analyze_topic, estimate_scope, optimize_plan
from research_orchestrator.planner.paths import (
    DEFAULT_SLUG,
    MAX_SLUG_LENGTH,
    METADATA_SUFFIX,
    PLANNER_DIR,
    PlannerPaths,
    derive_slug,
    planner_paths,
)
from research_orchestrator.planner.registry import (
    PlannerArtifactIndex,
    PlannerMetadata,
    PlannerPathsRecord,
    PlannerRegistry,
    PlannerRegistryEntry,
    decode_registry,
)
from research_orchestrator.planner.tools import make_compose_plan, planner_tools

__all__ = [
    "DEFAULT_SLUG",
    "MAX_SLUG_LENGTH",
    "METADATA_SUFFIX",
    "PLANNER_DIR",
    "InitialPlan",
    "OptimizedPlan",
    "PlannerArtifactIndex",
    "PlannerMetadata",
    "PlannerPaths",
    "PlannerPathsRecord",
    "PlannerRegistry",
    "PlannerRegistryEntry",
    "ResearchTask",
    "ScopeEstimate",
    "TopicAnalysis",
    "analyze_topic",
    "build_initial_plan",
    "decode_document",
    "decode_registry",
    "derive_slug",
    "estimate_scope",
    "make_compose_plan",
    "optimize_plan",
    "planner_paths",
    "planner_tools",
]
