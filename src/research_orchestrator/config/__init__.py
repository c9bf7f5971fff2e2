"""Configuration system.

Main exports:
- OrchestratorSettings: Root configuration class
- PlannerConfig: Planner document settings
- LoggingConfig: Logging configuration
"""

from research_orchestrator.config.settings import (
    LoggingConfig,
    OrchestratorSettings,
    PlannerConfig,
)

__all__ = [
    "LoggingConfig",
    "OrchestratorSettings",
    "PlannerConfig",
]
