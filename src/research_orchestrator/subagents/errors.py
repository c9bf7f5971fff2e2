"""Sub-agent subsystem exceptions."""

from __future__ import annotations


class SubagentError(Exception):
    """Base exception for all sub-agent errors.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}({self.message!r})"


class SubagentConfigError(SubagentError):
    """Raised when a sub-agent definition is invalid.

    Attributes:
        name: Sub-agent name with the invalid definition.
        detail: Description of the problem.
    """

    def __init__(self, name: str, detail: str) -> None:
        """Initialize the error.

        Args:
            name: Sub-agent name with the invalid definition.
            detail: Description of the problem.
        """
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid configuration for sub-agent '{name}': {detail}")

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(name={self.name!r}, detail={self.detail!r})"

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.name, self.detail))


class SubagentNotFoundError(SubagentError):
    """Raised when a dispatch names a sub-agent that is not registered.

    Attributes:
        name: Requested sub-agent name.
        available: Registered sub-agent names.
    """

    def __init__(self, name: str, available: list[str]) -> None:
        """Initialize the error.

        Args:
            name: Requested sub-agent name.
            available: Registered sub-agent names.
        """
        self.name = name
        self.available = list(available)
        super().__init__(
            f"Agent '{name}' not found. Available agents: {', '.join(self.available)}"
        )

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(name={self.name!r}, available={self.available!r})"

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.name, self.available))


class SubagentDelegationError(SubagentError):
    """Raised, or rendered, when a sub-agent run fails.

    Attributes:
        name: Sub-agent that failed.
        task: Task description that was delegated.
        cause: Underlying exception.
    """

    def __init__(
        self,
        name: str,
        task: str,
        cause: BaseException | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            name: Sub-agent that failed.
            task: Task description that was delegated.
            cause: Underlying exception.
        """
        self.name = name
        self.task = task
        self.cause = cause
        super().__init__(f"Error executing task '{task}' with agent '{name}': {cause}")

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{type(self).__name__}(name={self.name!r}, task={self.task!r}, cause={self.cause!r})"
        )

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.name, self.task, self.cause))
