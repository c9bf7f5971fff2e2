"""Tests for sub-agent exceptions."""

from __future__ import annotations

import pickle

from research_orchestrator.subagents.errors import (
    SubagentConfigError,
    SubagentDelegationError,
    SubagentError,
    SubagentNotFoundError,
)


class TestSubagentErrors:
    """Messages, hierarchy and pickling."""

    def test_hierarchy(self) -> None:
        """All errors derive from SubagentError."""
        for error in (
            SubagentConfigError("a", "bad"),
            SubagentNotFoundError("a", []),
            SubagentDelegationError("a", "t"),
        ):
            assert isinstance(error, SubagentError)

    def test_not_found_message(self) -> None:
        """The message enumerates available names in order."""
        error = SubagentNotFoundError("x", ["planner-agent", "research-agent"])
        assert str(error) == (
            "Agent 'x' not found. Available agents: planner-agent, research-agent"
        )

    def test_delegation_message(self) -> None:
        """The message names the task, the agent and the cause."""
        error = SubagentDelegationError("planner-agent", "plan", ValueError("boom"))
        assert str(error) == "Error executing task 'plan' with agent 'planner-agent': boom"

    def test_config_repr(self) -> None:
        """repr shows the constructor arguments."""
        error = SubagentConfigError("a", "bad")
        assert repr(error) == "SubagentConfigError(name='a', detail='bad')"

    def test_pickle_round_trip(self) -> None:
        """Errors survive pickling with their attributes."""
        error = SubagentNotFoundError("x", ["a"])
        restored = pickle.loads(pickle.dumps(error))
        assert restored.name == "x"
        assert restored.available == ["a"]
        assert str(restored) == str(error)
