"""Logging and observability.

Exports:
- SensitiveDataFilter, StructuredFormatter, setup_logging
- PACKAGE_LOGGER: Name of the package logger
"""

from research_orchestrator.observability.logging import (
    PACKAGE_LOGGER,
    REDACTED,
    SensitiveDataFilter,
    StructuredFormatter,
    setup_logging,
)

__all__ = [
    "PACKAGE_LOGGER",
    "REDACTED",
    "SensitiveDataFilter",
    "StructuredFormatter",
    "setup_logging",
]
