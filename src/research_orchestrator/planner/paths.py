"""Deterministic planner document paths derived from a research topic."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

PLANNER_DIR = "/research/plans"
MAX_SLUG_LENGTH = 60
DEFAULT_SLUG = "topic"
METADATA_SUFFIX = "_paths.json"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


class PlannerPaths(BaseModel):
    """Canonical document paths for one planning topic.

    Attributes:
        slug: Key-safe identifier, possibly truncated.
        original_slug: Slug before truncation.
        dir: Directory prefix shared by all planner documents.
        analysis: Topic analysis document path.
        scope: Scope estimation document path.
        plan: Initial plan document path.
        optimized: Optimized plan document path.
        metadata: Per-topic metadata document path.
        truncated: Whether the slug was cut to ``max_length``.
        max_length: Maximum slug length used.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    slug: str
    original_slug: str = Field(alias="originalSlug")
    dir: str
    analysis: str
    scope: str
    plan: str
    optimized: str
    metadata: str
    truncated: bool
    max_length: int = Field(alias="maxLength", gt=0)


def normalize_topic(topic: str) -> str:
    """Case-fold a topic and collapse non-alphanumeric runs to underscores."""
    return _NON_ALNUM.sub("_", topic.strip().lower()).strip("_")


def derive_slug(topic: str, max_length: int = MAX_SLUG_LENGTH) -> tuple[str, str, bool]:
    """Derive a slug from a free-text topic.

    Args:
        topic: Free-text research topic.
        max_length: Maximum slug length.

    Returns:
        Tuple of (slug, original slug, truncated flag).
    """
    original = normalize_topic(topic) or DEFAULT_SLUG
    if len(original) <= max_length:
        return original, original, False
    return original[:max_length], original, True


def planner_paths(
    topic: str,
    *,
    directory: str = PLANNER_DIR,
    max_length: int = MAX_SLUG_LENGTH,
) -> PlannerPaths:
    """Build the canonical planner paths for a topic.

    Pure function of its inputs: the same topic always yields the same paths.

    Example::

        >>> planner_paths("NVIDIA Stock").plan
        '/research/plans/nvidia_stock_plan.json'

    Args:
        topic: Free-text research topic.
        directory: Directory prefix for planner documents.
        max_length: Maximum slug length.

    Returns:
        The ``PlannerPaths`` for the topic.
    """
    slug, original, truncated = derive_slug(topic, max_length)
    base = f"{directory}/{slug}"
    return PlannerPaths(
        slug=slug,
        original_slug=original,
        dir=directory,
        analysis=f"{base}_analysis.json",
        scope=f"{base}_scope.json",
        plan=f"{base}_plan.json",
        optimized=f"{base}_plan_optimized.json",
        metadata=f"{base}{METADATA_SUFFIX}",
        truncated=truncated,
        max_length=max_length,
    )
