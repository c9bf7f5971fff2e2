"""Logging setup for the orchestration core.

Modules log through ``logging.getLogger(__name__)``. ``setup_logging`` attaches
a single handler to the package logger: plain text, JSON lines, or ``rich``.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

from rich.logging import RichHandler

from research_orchestrator.config.settings import LoggingConfig

PACKAGE_LOGGER = "research_orchestrator"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
REDACTED = "***REDACTED***"

# Standard LogRecord attributes, excluded from structured "extra" output
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys() | {"message", "asctime"}
)


class SensitiveDataFilter(logging.Filter):
    """Mask credential-looking values in log messages.

    Matches ``key=value``, ``key: value`` and JSON ``"key": "value"`` forms
    for keys containing ``api_key``, ``token``, ``secret`` or ``password``,
    plus bare ``sk-`` style keys.
    """

    _PATTERNS = (
        re.compile(
            r"""(?P<key>["']?[\w-]*(?:api[_-]?key|token|secret|password)[\w-]*["']?\s*[:=]\s*)"""
            r"""(?P<quote>["']?)(?P<value>[^\s"',}]+)""",
            re.IGNORECASE,
        ),
        re.compile(r"\bsk-[A-Za-z0-9_-]{8,}"),
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True

    @classmethod
    def redact(cls, text: str) -> str:
        """Return ``text`` with sensitive values replaced."""
        keyed, bare = cls._PATTERNS
        text = keyed.sub(lambda m: f"{m['key']}{m['quote']}{REDACTED}", text)
        return bare.sub(REDACTED, text)


class StructuredFormatter(logging.Formatter):
    """Format records as single-line JSON objects.

    Fields passed through ``extra=`` are included at the top level.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_handler(config: LoggingConfig) -> logging.Handler:
    if config.structured:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
    elif config.rich:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    if config.redact_sensitive:
        handler.addFilter(SensitiveDataFilter())
    return handler


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the package logger.

    Replaces any handler previously installed by this function, so calling it
    again with a new config is safe.

    Args:
        config: Logging settings. Defaults to ``LoggingConfig()``.

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_research_orchestrator", False):
            logger.removeHandler(handler)

    handler = _build_handler(config)
    handler._research_orchestrator = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(config.level)
    return logger
