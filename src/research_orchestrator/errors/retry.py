"""Retry with exponential backoff and per-attempt timeouts.

Every attempt races the operation against a timer. An attempt that loses the
race counts as a failure, but the underlying awaitable is left running: its
late result (or exception) is retrieved and discarded so it never surfaces.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, Field

from research_orchestrator.errors.exceptions import OperationTimeoutError, RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Retry and timeout settings for a fallible external call.

    Attributes:
        max_attempts: Total attempts before giving up.
        initial_delay_seconds: Delay before the second attempt.
        max_delay_seconds: Upper bound for any single delay.
        backoff_multiplier: Factor applied to the delay after each failure.
        timeout_seconds: Time budget for a single attempt.
    """

    max_attempts: int = Field(default=3, ge=1, description="Total attempts")
    initial_delay_seconds: float = Field(default=1.0, ge=0, description="First retry delay")
    max_delay_seconds: float = Field(default=10.0, ge=0, description="Delay cap")
    backoff_multiplier: float = Field(default=2.0, ge=1, description="Delay growth factor")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-attempt timeout")

    def delays(self) -> list[float]:
        """Return the sleep before each retry, in order.

        There is one delay fewer than attempts: no sleep follows the last one.
        """
        delays: list[float] = []
        delay = self.initial_delay_seconds
        for _ in range(self.max_attempts - 1):
            delays.append(delay)
            delay = min(delay * self.backoff_multiplier, self.max_delay_seconds)
        return delays


def _discard_late_result(task: asyncio.Future[object]) -> None:
    """Retrieve and drop the outcome of an attempt that already timed out."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Ignoring late failure from timed-out attempt: %s", exc)
    else:
        logger.debug("Ignoring late result from timed-out attempt")


async def _attempt(operation: Callable[[], Awaitable[T]], timeout_seconds: float) -> T:
    task = asyncio.ensure_future(operation())
    done, _ = await asyncio.wait({task}, timeout=timeout_seconds)
    if task not in done:
        task.add_done_callback(_discard_late_result)
        raise OperationTimeoutError(timeout_seconds)
    return task.result()


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run an async operation, retrying every failure with exponential backoff.

    All exceptions are retried. Error classification is left to the caller,
    which inspects the final ``RetryExhaustedError.cause``.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        policy: Retry settings. Defaults to ``RetryPolicy()``.
        sleep: Awaitable sleep used between attempts.

    Returns:
        The first successful result.

    Raises:
        RetryExhaustedError: After ``policy.max_attempts`` failed attempts.
    """
    policy = policy or RetryPolicy()
    delays = policy.delays()
    last_error: Exception | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await _attempt(operation, policy.timeout_seconds)
        except Exception as exc:
            last_error = exc
            if attempt == policy.max_attempts:
                break
            delay = delays[attempt - 1]
            logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.2fs",
                attempt,
                policy.max_attempts,
                exc,
                delay,
            )
            await sleep(delay)

    raise RetryExhaustedError(policy.max_attempts, cause=last_error) from last_error
