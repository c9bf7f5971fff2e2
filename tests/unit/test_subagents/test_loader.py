"""Tests for markdown sub-agent definitions."""

from __future__ import annotations

from pathlib import Path

import pytest

from research_orchestrator.subagents.errors import SubagentConfigError
from research_orchestrator.subagents.loader import discover_subagents, load_subagent_spec

RESEARCH_MD = """---
name: research-agent
description: Gathers raw findings
tools: [tavily_search, read_file]
requires-planning: true
---

You are a dedicated researcher.
"""


class TestLoadSubagentSpec:
    """Tests for load_subagent_spec."""

    def test_frontmatter_and_body(self, tmp_path: Path) -> None:
        """Frontmatter fields map onto SubAgentSpec and the body becomes the prompt."""
        path = tmp_path / "research.md"
        path.write_text(RESEARCH_MD)

        spec = load_subagent_spec(path)

        assert spec.name == "research-agent"
        assert spec.tools == ["tavily_search", "read_file"]
        assert spec.requires_planning is True
        assert spec.system_prompt == "You are a dedicated researcher."

    def test_name_defaults_to_stem(self, tmp_path: Path) -> None:
        """Without a name key the file stem is used."""
        path = tmp_path / "critic.md"
        path.write_text("---\ndescription: Critiques\n---\n")

        spec = load_subagent_spec(path)

        assert spec.name == "critic"
        assert spec.system_prompt == ""
        assert spec.tools is None

    def test_explicit_prompt_wins(self, tmp_path: Path) -> None:
        """A system-prompt key takes precedence over the body."""
        path = tmp_path / "a.md"
        path.write_text("---\ndescription: d\nsystem-prompt: From frontmatter\n---\nBody\n")
        assert load_subagent_spec(path).system_prompt == "From frontmatter"

    def test_missing_frontmatter(self, tmp_path: Path) -> None:
        """Files without frontmatter are rejected."""
        path = tmp_path / "plain.md"
        path.write_text("Just text")

        with pytest.raises(SubagentConfigError, match="no .---. delimited YAML header"):
            load_subagent_spec(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Unparseable YAML is rejected."""
        path = tmp_path / "bad.md"
        path.write_text("---\ndescription: [unclosed\n---\n")

        with pytest.raises(SubagentConfigError, match="unreadable YAML header"):
            load_subagent_spec(path)

    def test_validation_failure(self, tmp_path: Path) -> None:
        """A definition missing required fields is rejected with its name."""
        path = tmp_path / "nodesc.md"
        path.write_text("---\nname: nodesc\n---\n")

        with pytest.raises(SubagentConfigError) as exc_info:
            load_subagent_spec(path)

        assert exc_info.value.name == "nodesc"
        assert "invalid fields: description" in exc_info.value.detail

    def test_unreadable_file(self, tmp_path: Path) -> None:
        """A missing file is reported as a config error."""
        with pytest.raises(SubagentConfigError, match="could not be read"):
            load_subagent_spec(tmp_path / "missing.md")


class TestDiscoverSubagents:
    """Tests for discover_subagents."""

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing directory yields no specs."""
        assert discover_subagents(tmp_path / "agents") == []

    def test_sorted_by_filename(self, tmp_path: Path) -> None:
        """Definitions load in filename order and other files are ignored."""
        (tmp_path / "b.md").write_text("---\ndescription: second\n---\n")
        (tmp_path / "a.md").write_text("---\ndescription: first\n---\n")
        (tmp_path / "notes.txt").write_text("ignored")

        specs = discover_subagents(tmp_path)

        assert [spec.name for spec in specs] == ["a", "b"]
