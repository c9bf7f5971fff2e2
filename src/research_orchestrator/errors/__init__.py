"""Error handling and recovery."""

from research_orchestrator.errors.exceptions import (
    MCPConnectionError,
    OperationTimeoutError,
    OrchestratorError,
    RateLimitError,
    RetryExhaustedError,
    SearchTimeoutError,
    ToolExecutionError,
)
from research_orchestrator.errors.handling import (
    format_error_for_user,
    is_retryable_error,
    root_cause,
    safe_tool_execution,
)
from research_orchestrator.errors.retry import RetryPolicy, with_retry

__all__ = [
    # Exceptions
    "MCPConnectionError",
    "OperationTimeoutError",
    "OrchestratorError",
    "RateLimitError",
    "RetryExhaustedError",
    "SearchTimeoutError",
    "ToolExecutionError",
    # Handling
    "format_error_for_user",
    "is_retryable_error",
    "root_cause",
    "safe_tool_execution",
    # Retry
    "RetryPolicy",
    "with_retry",
]
