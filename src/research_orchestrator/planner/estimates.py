"""Deterministic topic classification, scope estimation and plan refinement.

These rules back the planner's analysis tools. They are keyword and table
driven so the same inputs always produce the same documents.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Literal

from research_orchestrator.planner.documents import (
    OptimizedPlan,
    ResearchTask,
    ScopeEstimate,
    TopicAnalysis,
    utc_now,
)

TopicType = Literal["technical", "academic", "business", "creative", "general"]
Complexity = Literal["low", "medium", "high"]

# Checked in order; the first matching group wins.
TOPIC_KEYWORDS: tuple[tuple[TopicType, tuple[str, ...]], ...] = (
    (
        "technical",
        (
            "api",
            "code",
            "programming",
            "software",
            "technology",
            "framework",
            "library",
            "algorithm",
        ),
    ),
    (
        "academic",
        ("research", "study", "analysis", "theory", "methodology", "academic", "scholarly"),
    ),
    ("business", ("business", "market", "industry", "company", "strategy", "revenue", "profit")),
    ("creative", ("design", "art", "creative", "aesthetic", "style", "visual")),
)

LONG_TOPIC_THRESHOLD = 100
COMPLEX_WORD_COUNT = 10
HIGH_COMPLEXITY_SCORE = 3
LOW_COMPLEXITY_SCORE = 1
DEFAULT_HOURS = 3

COMMON_AREAS = ("background research", "current state analysis", "key findings")

TYPE_AREAS: dict[str, tuple[str, ...]] = {
    "technical": ("technical documentation", "implementation examples", "best practices"),
    "academic": ("literature review", "methodology analysis", "theoretical framework"),
    "business": ("market analysis", "competitive landscape", "trend analysis"),
    "creative": ("design principles", "current trends", "case studies"),
    "general": ("overview", "key aspects", "examples"),
}

SUGGESTED_SOURCES: dict[str, tuple[str, ...]] = {
    "technical": (
        "technical documentation",
        "API references",
        "code repositories",
        "technical blogs",
    ),
    "academic": (
        "academic journals",
        "research papers",
        "scholarly databases",
        "institutional sources",
    ),
    "business": ("industry reports", "market research", "company publications", "business news"),
    "creative": ("design portfolios", "industry publications", "case studies", "trend reports"),
    "general": ("general web search", "encyclopedias", "news sources", "expert opinions"),
}

HOURS: dict[str, dict[str, int]] = {
    "low": {"technical": 2, "academic": 3, "business": 2, "creative": 2, "general": 2},
    "medium": {"technical": 4, "academic": 6, "business": 4, "creative": 3, "general": 3},
    "high": {"technical": 8, "academic": 10, "business": 6, "creative": 5, "general": 5},
}

HIGH_PRIORITY_AREAS: dict[str, tuple[str, ...]] = {
    "technical": ("technical documentation", "implementation examples"),
    "academic": ("literature review", "methodology analysis"),
    "business": ("market analysis", "competitive landscape"),
    "creative": ("design principles", "current trends"),
    "general": ("background research", "overview"),
}

MIN_PLAN_SIZE = 3
SMALL_PLAN_SIZE = 5
LARGE_PLAN_SIZE = 8


def classify_topic(topic: str, context: str | None = None) -> TopicType:
    """Classify a topic by keyword, searching the topic and context together."""
    text = f"{topic} {context or ''}".lower()
    for topic_type, keywords in TOPIC_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return topic_type
    return "general"


def estimate_complexity(topic: str) -> Complexity:
    """Score a topic on length, wording and breadth.

    Three or more indicators mean high complexity, one or none mean low.
    """
    indicators = [
        len(topic) > LONG_TOPIC_THRESHOLD,
        "compare" in topic,
        "analysis" in topic,
        "comprehensive" in topic,
        len(topic.split(" ")) > COMPLEX_WORD_COUNT,
    ]
    score = sum(indicators)
    if score >= HIGH_COMPLEXITY_SCORE:
        return "high"
    if score <= LOW_COMPLEXITY_SCORE:
        return "low"
    return "medium"


def estimated_hours(complexity: str, topic_type: str) -> int:
    """Look up the research hours for a complexity and topic type."""
    by_type = HOURS.get(complexity, HOURS["medium"])
    return by_type.get(topic_type, by_type.get("general", DEFAULT_HOURS))


def analyze_topic(topic: str, context: str | None = None) -> TopicAnalysis:
    """Build the topic analysis document for a topic."""
    topic_type = classify_topic(topic, context)
    complexity = estimate_complexity(topic)
    return TopicAnalysis(
        topic=topic,
        context=context or "",
        topic_type=topic_type,
        complexity=complexity,
        research_areas=[*COMMON_AREAS, *TYPE_AREAS.get(topic_type, TYPE_AREAS["general"])],
        suggested_sources=list(SUGGESTED_SOURCES.get(topic_type, SUGGESTED_SOURCES["general"])),
        estimated_timeframe=f"{estimated_hours(complexity, topic_type)} hours",
        timestamp=utc_now(),
    )


def task_priority(area: str, topic_type: str) -> Literal["high", "medium"]:
    return "high" if area in HIGH_PRIORITY_AREAS.get(topic_type, ()) else "medium"


def estimate_scope(
    topic: str,
    topic_type: str,
    complexity: str,
    research_areas: Sequence[str],
) -> ScopeEstimate:
    """Split the estimated hours across research areas as prioritized tasks.

    Args:
        topic: The research topic.
        topic_type: Classification from the topic analysis.
        complexity: Complexity level from the topic analysis.
        research_areas: Areas that need research, one task each.

    Returns:
        The scope estimate document.
    """
    hours = estimated_hours(complexity, topic_type)
    per_area = math.ceil(hours / len(research_areas)) if research_areas else 0
    tasks = [
        ResearchTask(area=area, estimated_time=per_area, priority=task_priority(area, topic_type))
        for area in research_areas
    ]
    return ScopeEstimate(
        topic=topic,
        estimated_total_hours=hours,
        research_tasks=tasks,
        suggested_milestones=[
            f"Milestone {index}: Complete research on {task.area}"
            for index, task in enumerate(tasks, 1)
        ],
        resource_requirements={
            "searchTools": (
                ["technical docs", "code repositories"]
                if topic_type == "technical"
                else ["general web search"]
            ),
            "timeAllocation": "extended" if complexity == "high" else "standard",
            "expertiseLevel": "expert" if topic_type == "academic" else "intermediate",
        },
        timestamp=utc_now(),
    )


def apply_feedback(plan: list[str], feedback: str | None) -> list[str]:
    """Expand or shorten a plan on "more detail" or "less" feedback."""
    if not feedback:
        return list(plan)
    lowered = feedback.lower()
    if "more detail" in lowered:
        return [f"{task} (detailed research)" for task in plan]
    if "less" in lowered:
        return plan[: max(MIN_PLAN_SIZE, len(plan) - 2)]
    return list(plan)


def _is_technical_task(task: str) -> bool:
    lowered = task.lower()
    return "technical" in lowered or "documentation" in lowered


def optimize_plan(
    topic: str,
    current_plan: Sequence[str],
    analysis: TopicAnalysis,
    user_feedback: str | None = None,
) -> OptimizedPlan:
    """Refine a plan with feedback, reorder it by topic type and report gaps.

    Technical topics move technical and documentation tasks to the front,
    keeping relative order otherwise.
    """
    original = list(current_plan)
    optimized = apply_feedback(original, user_feedback)
    if analysis.topic_type == "technical":
        optimized.sort(key=lambda task: not _is_technical_task(task))

    gaps = [
        f"Missing coverage for: {area}"
        for area in analysis.research_areas
        if not any(area.lower() in task.lower() for task in optimized)
    ]

    suggestions: list[str] = []
    if analysis.complexity == "high" and len(optimized) < SMALL_PLAN_SIZE:
        suggestions.append("Consider breaking down complex topics into more specific sub-tasks")
    if len(optimized) > LARGE_PLAN_SIZE:
        suggestions.append("Consider grouping related tasks to improve efficiency")

    improvements: list[str] = []
    if len(optimized) > len(original):
        improvements.append("Added comprehensive coverage")
    if len(optimized) < len(original):
        improvements.append("Streamlined for efficiency")

    return OptimizedPlan(
        topic=topic,
        original_plan=original,
        optimized_plan=optimized,
        identified_gaps=gaps,
        suggestions_for_improvement=suggestions,
        estimated_improvement=", ".join(improvements) or "Refined based on topic analysis",
        user_feedback=user_feedback or None,
        timestamp=utc_now(),
    )
