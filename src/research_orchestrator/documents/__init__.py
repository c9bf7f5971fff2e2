"""Virtual document store and the tools that read and write it.

Classes:
    DocumentStore: Ordered path-to-content map standing in for a filesystem.
    AgentState: Run dependencies shared by an agent and its tools.
    Todo: A todo list entry.
    ChatMessage: A role-tagged message.

Functions:
    merge_documents: Parent-preserving, child-overlay merge.
    filesystem_tools: ``ls``/``read_file``/``write_file``/``edit_file``/``write_todos``.
"""

from __future__ import annotations

from research_orchestrator.documents.state import AgentState, ChatMessage, Todo
from research_orchestrator.documents.store import DocumentStore, merge_documents
from research_orchestrator.documents.tools import (
    edit_file,
    filesystem_tools,
    ls,
    read_file,
    write_file,
    write_todos,
)

__all__ = [
    "AgentState",
    "ChatMessage",
    "DocumentStore",
    "Todo",
    "edit_file",
    "filesystem_tools",
    "ls",
    "merge_documents",
    "read_file",
    "write_file",
    "write_todos",
]
