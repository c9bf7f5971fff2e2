"""Default deep-research sub-agents: planner, researcher and critic."""

from __future__ import annotations

from research_orchestrator.planner.paths import PLANNER_DIR
from research_orchestrator.subagents.config import (
    CRITIQUE_AGENT,
    PLANNER_AGENT,
    RESEARCH_AGENT,
    SubAgentSpec,
)

PLANNER_PROMPT = f"""You are a dedicated research planning assistant. Produce actionable,
well-structured research plans for a main agent to execute. Do not perform the research.

All planning artifacts live under {PLANNER_DIR}/:
- {{slug}}_analysis.json: topic analysis
- {{slug}}_scope.json: scope estimate and milestones
- {{slug}}_plan.json: research plan
- {{slug}}_plan_optimized.json: plan refined after feedback

Workflow:
1. Call topic_analysis to classify the topic.
2. Call scope_estimation to break it into tasks, hours and milestones.
3. Call compose_plan to build the plan and its metadata.
4. Call plan_optimization when the user gives feedback on the plan.

Use read_file and edit_file to inspect or adjust the saved documents. Never claim an
artifact exists unless you wrote it this turn. Run ls on {PLANNER_DIR}/ when done and
report every path you touched."""

RESEARCH_PROMPT = """You are a dedicated research assistant. Return RAW RESEARCH DATA as
bullet points with source URLs, not a polished report.

Read the current plan under /research/plans/ before searching. Save structured findings under
/research/findings/. Research one sub-topic per task."""

CRITIQUE_PROMPT = """You are a dedicated editor and quality analyst. Critique the final report
for structure, completeness, accuracy and clarity, and return structured findings rather than
prose. Save critique artifacts under /research/critiques/."""

FILE_TOOLS = ["ls", "read_file", "write_file", "edit_file"]
SEARCH_TOOLS = ["tavily_search", "exa_search"]
PLANNER_TOOLS = ["topic_analysis", "scope_estimation", "compose_plan", "plan_optimization"]


def default_subagents() -> list[SubAgentSpec]:
    """Return the planner, research and critique sub-agent specs.

    Search tools are supplied by the caller's tool catalog.
    """
    return [
        SubAgentSpec(
            name=CRITIQUE_AGENT,
            description=(
                "Used to critique the final report. Returns structured critique data for "
                "synthesis by the main agent. Do not echo its response to the user."
            ),
            system_prompt=CRITIQUE_PROMPT,
            tools=[*SEARCH_TOOLS, *FILE_TOOLS],
            requires_planning=True,
        ),
        SubAgentSpec(
            name=RESEARCH_AGENT,
            description=(
                "Used to extract raw research data for one sub-topic at a time. Returns "
                "unformatted findings with sources. Use it only as source material."
            ),
            system_prompt=RESEARCH_PROMPT,
            tools=[*SEARCH_TOOLS, *FILE_TOOLS],
            requires_planning=True,
        ),
        SubAgentSpec(
            name=PLANNER_AGENT,
            description=(
                "Used to create research plans for complex topics: topic analysis, scope "
                "estimation and an initial plan. Run it before research or critique."
            ),
            system_prompt=PLANNER_PROMPT,
            tools=[*PLANNER_TOOLS, *FILE_TOOLS, "write_todos"],
        ),
    ]
