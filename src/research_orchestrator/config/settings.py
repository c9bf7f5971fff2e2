"""Root settings for an orchestration session.

Values load from constructor arguments, then ``RESEARCH_ORCH_*`` environment
variables (``__`` separates nested sections), then a ``.env`` file.

Example::

    RESEARCH_ORCH_MODEL=anthropic:claude-sonnet-4-5
    RESEARCH_ORCH_RETRY__MAX_ATTEMPTS=5
    RESEARCH_ORCH_LOGGING__STRUCTURED=true
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from research_orchestrator.errors.retry import RetryPolicy
from research_orchestrator.planner.paths import MAX_SLUG_LENGTH, PLANNER_DIR


class PlannerConfig(BaseModel):
    """Where planner documents live and how slugs are bounded."""

    directory: str = Field(default=PLANNER_DIR, description="Planner document prefix")
    max_slug_length: int = Field(default=MAX_SLUG_LENGTH, gt=0, description="Slug length cap")


class LoggingConfig(BaseModel):
    """Logging output settings.

    Attributes:
        level: Minimum level for the package logger.
        structured: Emit JSON lines instead of plain text.
        rich: Render through ``rich`` (ignored when ``structured``).
        redact_sensitive: Mask API keys, tokens and secrets in messages.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    structured: bool = False
    rich: bool = False
    redact_sensitive: bool = True


class OrchestratorSettings(BaseSettings):
    """Root configuration for an ``OrchestratorSession``.

    Attributes:
        model: Default model for sub-agents without an override.
        retry: Retry policy for search capabilities.
        planner: Planner document settings.
        logging: Logging settings.
        recursion_limit: Maximum model requests per sub-agent run.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESEARCH_ORCH_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    model: str = Field(default="openai:gpt-4o-mini", description="Default model")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    planner: PlannerConfig = Field(default_factory=PlannerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    recursion_limit: int = Field(default=100, gt=0, description="Requests per sub-agent run")
