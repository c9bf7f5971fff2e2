"""Virtual filesystem tools operating on ``AgentState.documents``.

Each tool is a plain function taking ``RunContext[AgentState]`` so it can be
registered directly on a pydantic-ai agent. Failures are returned as
``Error: ...`` strings rather than raised, so the model can recover.
"""

from __future__ import annotations

import logging

from pydantic_ai import RunContext, Tool

from research_orchestrator.documents.state import AgentState, Todo

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 2000
LINE_NUMBER_PADDING = 6
DEFAULT_READ_LIMIT = 2000


def ls(ctx: RunContext[AgentState], prefix: str = "") -> list[str]:
    """List files in the virtual filesystem.

    Args:
        prefix: Only list paths starting with this prefix, e.g. ``/research/plans/``.
    """
    return ctx.deps.documents.list(prefix)


def read_file(
    ctx: RunContext[AgentState],
    file_path: str,
    offset: int = 0,
    limit: int = DEFAULT_READ_LIMIT,
) -> str:
    """Read a file from the virtual filesystem with line numbers.

    Args:
        file_path: Absolute path of the file to read.
        offset: Line offset to start reading from.
        limit: Maximum number of lines to read.
    """
    documents = ctx.deps.documents
    if file_path not in documents:
        return f"Error: File '{file_path}' not found"

    content = documents[file_path]
    if not content or not content.strip():
        return "System reminder: File exists but has empty contents"

    if offset < 0:
        return f"Error: Line offset {offset} must not be negative"

    lines = content.split("\n")
    if offset >= len(lines):
        return f"Error: Line offset {offset} exceeds file length ({len(lines)} lines)"

    end = min(offset + limit, len(lines))
    numbered = [
        f"{index + 1:>{LINE_NUMBER_PADDING}}\t{lines[index][:MAX_LINE_LENGTH]}"
        for index in range(offset, end)
    ]
    return "\n".join(numbered)


def write_file(ctx: RunContext[AgentState], file_path: str, content: str) -> str:
    """Write content to a file, replacing any existing content.

    Args:
        file_path: Absolute path of the file to write.
        content: Full content of the file.
    """
    ctx.deps.documents.write(file_path, content)
    logger.debug("Wrote %d chars to %s", len(content), file_path)
    return f"Updated file {file_path}"


def edit_file(
    ctx: RunContext[AgentState],
    file_path: str,
    old_string: str,
    new_string: str,
    replace_all: bool = False,
) -> str:
    """Replace an exact string in an existing file.

    Args:
        file_path: Absolute path of the file to edit.
        old_string: String to be replaced (must match exactly).
        new_string: String to replace it with.
        replace_all: Replace every occurrence instead of requiring a unique match.
    """
    documents = ctx.deps.documents
    if file_path not in documents:
        return f"Error: File '{file_path}' not found"

    content = documents[file_path]
    occurrences = content.count(old_string) if old_string else 0
    if occurrences == 0:
        return f"Error: String not found in file: '{old_string}'"

    if not replace_all and occurrences > 1:
        return (
            f"Error: String '{old_string}' appears {occurrences} times in file. "
            "Use replace_all=True to replace all instances, or provide a more specific "
            "string with surrounding context."
        )

    count = -1 if replace_all else 1
    documents.write(file_path, content.replace(old_string, new_string, count))
    return f"Updated file {file_path}"


def write_todos(ctx: RunContext[AgentState], todos: list[Todo]) -> str:
    """Replace the todo list used to track multi-step work.

    Args:
        todos: The complete, updated list of todo items.
    """
    ctx.deps.todos = list(todos)
    rendered = [todo.model_dump() for todo in todos]
    return f"Updated todo list to {rendered}"


def filesystem_tools() -> list[Tool[AgentState]]:
    """Return the virtual filesystem and todo tools as pydantic-ai ``Tool``s."""
    return [
        Tool(ls, takes_ctx=True),
        Tool(read_file, takes_ctx=True),
        Tool(write_file, takes_ctx=True),
        Tool(edit_file, takes_ctx=True),
        Tool(write_todos, takes_ctx=True),
    ]
