"""Tests for logging setup, redaction and structured output."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
from rich.logging import RichHandler

from research_orchestrator.config import LoggingConfig
from research_orchestrator.observability import (
    PACKAGE_LOGGER,
    REDACTED,
    SensitiveDataFilter,
    StructuredFormatter,
    setup_logging,
)


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """The package logger, restored after the test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_research_orchestrator", False)]


class TestSensitiveDataFilter:
    """Tests for SensitiveDataFilter."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("api_key=abc123", f"api_key={REDACTED}"),
            ("token: xyz", f"token: {REDACTED}"),
            ('{"password": "hunter2"}', f'{{"password": "{REDACTED}"}}'),
            ("using sk-abcdefgh12345 now", f"using {REDACTED} now"),
        ],
    )
    def test_redact(self, text: str, expected: str) -> None:
        """Credential-looking values are masked."""
        assert SensitiveDataFilter.redact(text) == expected

    def test_leaves_ordinary_text(self) -> None:
        """Text without secrets is unchanged."""
        text = "Dispatching research-agent for 'EV batteries'"
        assert SensitiveDataFilter.redact(text) == text

    def test_filter_rewrites_record(self) -> None:
        """Formatted arguments are redacted and cleared."""
        record = logging.LogRecord(
            "research_orchestrator", logging.INFO, __file__, 1, "key %s", ("api_key=abc",), None
        )
        assert SensitiveDataFilter().filter(record) is True
        assert record.getMessage() == f"key api_key={REDACTED}"


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_json_line_with_extra(self) -> None:
        """Records become JSON including extra fields."""
        record = logging.LogRecord(
            "research_orchestrator.subagents",
            logging.WARNING,
            __file__,
            1,
            "blocked %s",
            ("x",),
            None,
        )
        record.slug = "nvidia_stock"

        payload = json.loads(StructuredFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "research_orchestrator.subagents"
        assert payload["message"] == "blocked x"
        assert payload["slug"] == "nvidia_stock"
        assert "exception" not in payload


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_sets_level(self, package_logger: logging.Logger) -> None:
        """The package logger takes the configured level."""
        setup_logging(LoggingConfig(level="DEBUG"))
        assert package_logger.level == logging.DEBUG

    def test_replaces_own_handler(self, package_logger: logging.Logger) -> None:
        """Repeated setup keeps exactly one installed handler."""
        setup_logging(LoggingConfig())
        setup_logging(LoggingConfig(structured=True))

        (handler,) = _own_handlers(package_logger)
        assert isinstance(handler.formatter, StructuredFormatter)

    def test_rich_handler(self, package_logger: logging.Logger) -> None:
        """rich output installs a RichHandler."""
        setup_logging(LoggingConfig(rich=True))
        (handler,) = _own_handlers(package_logger)
        assert isinstance(handler, RichHandler)

    def test_redaction_toggle(self, package_logger: logging.Logger) -> None:
        """The filter is attached only when redaction is enabled."""
        setup_logging(LoggingConfig(redact_sensitive=False))
        (handler,) = _own_handlers(package_logger)
        assert not any(isinstance(f, SensitiveDataFilter) for f in handler.filters)
