"""Tests for the virtual filesystem tools."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from research_orchestrator.documents.state import AgentState, Todo
from research_orchestrator.documents.store import DocumentStore
from research_orchestrator.documents.tools import (
    edit_file,
    filesystem_tools,
    ls,
    read_file,
    write_file,
    write_todos,
)


@pytest.fixture
def ctx() -> Any:
    """Minimal run context exposing only ``deps``."""
    state = AgentState(
        documents=DocumentStore(
            {
                "/notes.md": "line one\nline two\nline three",
                "/research/plans/a_plan.json": "{}",
                "/empty.md": "",
            }
        )
    )
    return SimpleNamespace(deps=state)


class TestLs:
    """Tests for ls."""

    def test_lists_all(self, ctx: Any) -> None:
        """No prefix lists every path, sorted."""
        assert ls(ctx) == ["/empty.md", "/notes.md", "/research/plans/a_plan.json"]

    def test_prefix_filter(self, ctx: Any) -> None:
        """Prefix restricts the listing."""
        assert ls(ctx, "/research/") == ["/research/plans/a_plan.json"]


class TestReadFile:
    """Tests for read_file."""

    def test_numbers_lines(self, ctx: Any) -> None:
        """Output is cat -n style with padded line numbers."""
        assert read_file(ctx, "/notes.md") == (
            "     1\tline one\n     2\tline two\n     3\tline three"
        )

    def test_offset_and_limit(self, ctx: Any) -> None:
        """Offset and limit select a window of lines."""
        assert read_file(ctx, "/notes.md", offset=1, limit=1) == "     2\tline two"

    def test_offset_past_end(self, ctx: Any) -> None:
        """Offset beyond the file returns an error string."""
        result = read_file(ctx, "/notes.md", offset=10)
        assert result == "Error: Line offset 10 exceeds file length (3 lines)"

    def test_negative_offset_rejected(self, ctx: Any) -> None:
        """A negative offset returns an error instead of counting from the end."""
        result = read_file(ctx, "/notes.md", offset=-1)
        assert result == "Error: Line offset -1 must not be negative"

    def test_missing_file(self, ctx: Any) -> None:
        """Missing files return an error string."""
        assert read_file(ctx, "/nope.md") == "Error: File '/nope.md' not found"

    def test_empty_file_reminder(self, ctx: Any) -> None:
        """Empty files produce a reminder instead of content."""
        assert "empty contents" in read_file(ctx, "/empty.md")

    def test_long_lines_truncated(self, ctx: Any) -> None:
        """Lines are capped at 2000 characters."""
        ctx.deps.documents.write("/long.txt", "x" * 2500)
        line = read_file(ctx, "/long.txt")
        assert len(line.split("\t", 1)[1]) == 2000


class TestWriteAndEdit:
    """Tests for write_file and edit_file."""

    def test_write_creates_and_overwrites(self, ctx: Any) -> None:
        """write_file fully replaces content."""
        assert write_file(ctx, "/new.md", "first") == "Updated file /new.md"
        write_file(ctx, "/new.md", "second")
        assert ctx.deps.documents["/new.md"] == "second"

    def test_edit_unique_match(self, ctx: Any) -> None:
        """A unique match is replaced."""
        assert edit_file(ctx, "/notes.md", "line two", "LINE 2") == "Updated file /notes.md"
        assert "LINE 2" in ctx.deps.documents["/notes.md"]

    def test_edit_ambiguous_match_rejected(self, ctx: Any) -> None:
        """Multiple matches require replace_all."""
        result = edit_file(ctx, "/notes.md", "line", "row")
        assert result.startswith("Error: String 'line' appears 3 times")
        assert ctx.deps.documents["/notes.md"].startswith("line one")

    def test_edit_replace_all(self, ctx: Any) -> None:
        """replace_all replaces every occurrence."""
        edit_file(ctx, "/notes.md", "line", "row", replace_all=True)
        assert ctx.deps.documents["/notes.md"] == "row one\nrow two\nrow three"

    def test_edit_missing_string(self, ctx: Any) -> None:
        """An absent string returns an error."""
        assert edit_file(ctx, "/notes.md", "absent", "x").startswith("Error: String not found")

    def test_edit_missing_file(self, ctx: Any) -> None:
        """Editing a missing file returns an error."""
        assert edit_file(ctx, "/nope.md", "a", "b") == "Error: File '/nope.md' not found"


class TestWriteTodos:
    """Tests for write_todos."""

    def test_replaces_todo_list(self, ctx: Any) -> None:
        """The todo list is replaced wholesale."""
        ctx.deps.todos = [Todo(content="old", status="completed")]
        write_todos(ctx, [Todo(content="plan", status="in_progress")])
        assert [todo.content for todo in ctx.deps.todos] == ["plan"]


def test_filesystem_tool_names() -> None:
    """All file and todo tools are exposed under their function names."""
    names = [tool.name for tool in filesystem_tools()]
    assert names == ["ls", "read_file", "write_file", "edit_file", "write_todos"]
