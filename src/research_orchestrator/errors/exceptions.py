"""Custom exception hierarchy for the orchestration core."""

from __future__ import annotations

from typing import Any, ClassVar


class OrchestratorError(Exception):
    """Base exception for all orchestration errors.

    All custom exceptions raised by capabilities inherit from this class,
    allowing callers to catch every orchestration failure with one handler.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code.
        cause: Original exception that caused this error.
        details: Additional error context as key-value pairs.

    Details can be accessed as attributes (e.g., error.query).
    """

    code: str = "ORCHESTRATOR_ERROR"

    # Map attribute names to default values when not in details
    _defaults: ClassVar[dict[str, Any]] = {}

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
        **details: Any,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code. Defaults to the class code.
            cause: Original exception that caused this error.
            **details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.cause = cause
        self.details = details

    def __getattr__(self, name: str) -> Any:
        """Access details as attributes."""
        details = self.__dict__.get("details", {})
        if name in details:
            return details[name]
        if name in self._defaults:
            return self._defaults[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def __str__(self) -> str:
        """Return string representation."""
        return self.message

    def __reduce__(self) -> tuple:
        """Support pickling with keyword details."""
        return (_rebuild_error, (type(self), self.message, self.code, self.details))


def _rebuild_error(
    cls: type[OrchestratorError],
    message: str,
    code: str,
    details: dict[str, Any],
) -> OrchestratorError:
    error = OrchestratorError.__new__(cls)
    OrchestratorError.__init__(error, message, code=code, **details)
    return error


class ToolExecutionError(OrchestratorError):
    """Error during tool execution.

    Raised when a tool fails to execute properly.

    Attributes from details: tool_name, original_error.
    """

    code = "TOOL_EXECUTION_ERROR"

    def __init__(
        self,
        tool_name: str,
        message: str,
        *,
        cause: BaseException | None = None,
        **details: Any,
    ) -> None:
        details.setdefault("original_error", str(cause) if cause else None)
        super().__init__(
            f"Tool '{tool_name}' execution failed: {message}",
            cause=cause,
            tool_name=tool_name,
            **details,
        )


class SearchTimeoutError(OrchestratorError):
    """A search query exceeded its time budget.

    Attributes from details: query, timeout_seconds.
    """

    code = "SEARCH_TIMEOUT"

    def __init__(self, query: str, timeout_seconds: float, **details: Any) -> None:
        super().__init__(
            f'Search query timed out after {timeout_seconds}s: "{query}"',
            query=query,
            timeout_seconds=timeout_seconds,
            **details,
        )


class MCPConnectionError(OrchestratorError):
    """Connection to an MCP server failed.

    Attributes from details: server_name, original_error.
    """

    code = "MCP_CONNECTION_ERROR"

    def __init__(
        self,
        server_name: str,
        message: str,
        *,
        cause: BaseException | None = None,
        **details: Any,
    ) -> None:
        details.setdefault("original_error", str(cause) if cause else None)
        super().__init__(
            f"Failed to connect to MCP server '{server_name}': {message}",
            cause=cause,
            server_name=server_name,
            **details,
        )


class RateLimitError(OrchestratorError):
    """Rate limit exceeded for an external service.

    Attributes from details: service, retry_after (seconds, default: None).
    """

    code = "RATE_LIMIT_ERROR"
    _defaults: ClassVar[dict[str, Any]] = {"retry_after": None}

    def __init__(self, service: str, retry_after: float | None = None, **details: Any) -> None:
        suffix = f". Retry after {retry_after}s" if retry_after else ""
        super().__init__(
            f"Rate limit exceeded for {service}{suffix}",
            service=service,
            retry_after=retry_after,
            **details,
        )


class OperationTimeoutError(OrchestratorError):
    """A single attempt exceeded its timeout.

    Attributes from details: timeout_seconds.
    """

    code = "OPERATION_TIMEOUT"

    def __init__(self, timeout_seconds: float, **details: Any) -> None:
        super().__init__(
            f"Operation timed out after {timeout_seconds}s",
            timeout_seconds=timeout_seconds,
            **details,
        )


class RetryExhaustedError(OrchestratorError):
    """All retry attempts failed.

    Attributes from details: attempts, last_error.
    """

    code = "MAX_RETRIES_EXCEEDED"

    def __init__(
        self,
        attempts: int,
        *,
        cause: BaseException | None = None,
        **details: Any,
    ) -> None:
        last_error = str(cause) if cause else None
        super().__init__(
            f"Operation failed after {attempts} attempts: {last_error}",
            cause=cause,
            attempts=attempts,
            last_error=last_error,
            **details,
        )
