"""Sub-agent definitions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_ai.models import Model

PLANNER_AGENT = "planner-agent"
RESEARCH_AGENT = "research-agent"
CRITIQUE_AGENT = "critique-agent"


class SubAgentSpec(BaseModel):
    """Definition of one delegatable sub-agent.

    Specs are immutable once the session that owns them is constructed.

    Attributes:
        name: Unique sub-agent identifier used by dispatch.
        description: When the orchestrating agent should delegate here.
        system_prompt: Fixed system instruction for every run.
        tools: Tool allow-list by name. None grants the whole catalog.
        model: Model override. None uses the session default.
        requires_planning: Whether planner artifacts must exist before dispatch.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(
        min_length=1,
        description="Unique sub-agent identifier",
    )
    description: str = Field(
        description="When to delegate to this sub-agent",
    )
    system_prompt: str = Field(
        default="",
        description="Fixed system instruction",
    )
    tools: list[str] | None = Field(
        default=None,
        description="Tool allow-list (None=entire catalog)",
    )
    model: str | Model | None = Field(
        default=None,
        description="Model override (None=session default)",
    )
    requires_planning: bool = Field(
        default=False,
        description="Block dispatch until planner artifacts exist",
    )
