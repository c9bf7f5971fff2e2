"""Conversational state passed to agents and tools as run dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field

from research_orchestrator.documents.store import DocumentStore


class Todo(BaseModel):
    """A single entry in the agent's todo list."""

    content: str = Field(description="Content of the todo item")
    status: Literal["pending", "in_progress", "completed"] = Field(
        description="Status of the todo",
    )


class ChatMessage(BaseModel):
    """A role-tagged message exchanged with an execution unit."""

    role: Literal["user", "assistant", "system", "tool"]
    content: str = ""


@dataclass
class AgentState:
    """State shared by an agent run and every tool it calls.

    Attributes:
        documents: The virtual document store.
        todos: Current todo list, replaced wholesale on update.
        messages: Messages in and out of an execution unit.
    """

    documents: DocumentStore = field(default_factory=DocumentStore)
    todos: list[Todo] = field(default_factory=list)
    messages: list[ChatMessage] = field(default_factory=list)

    def fork(self, messages: list[ChatMessage]) -> AgentState:
        """Copy this state for a nested run, replacing the message list."""
        return AgentState(
            documents=self.documents.copy(),
            todos=list(self.todos),
            messages=list(messages),
        )
