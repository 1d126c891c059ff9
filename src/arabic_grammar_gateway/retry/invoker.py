"""
Retrying invoker for async operations.

Runs a zero-argument coroutine factory for attempts ``0..max_retries``. A
failed attempt is retried only when the backoff policy classifies the error
as transient; anything else is re-raised straight away. The error from the
final attempt is re-raised unchanged, never wrapped.

Backoff uses ``asyncio.sleep`` so a waiting request never blocks other
requests on the event loop.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import structlog

from arabic_grammar_gateway.monitoring.metrics import retries_total
from arabic_grammar_gateway.retry.policy import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    compute_backoff_delay,
    describe,
    retry_reason,
    should_retry,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class AttemptState:
    """Per-invocation attempt bookkeeping. Never shared between calls."""

    attempt_index: int = 0
    last_error: BaseException | None = None

    def record_failure(self, error: BaseException) -> None:
        self.last_error = error


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
) -> T:
    """
    Await ``operation()`` with exponential backoff on transient failures.

    Each attempt calls ``operation`` exactly once. Results are not cached
    across attempts.

    Args:
        operation: Zero-argument callable returning an awaitable
        config: Retry configuration

    Returns:
        The first successful result

    Raises:
        Exception: The original error of the last attempt, when retries are
            exhausted or the error is not retryable
    """
    state = AttemptState()
    total_attempts = config.max_retries + 1

    for attempt in range(total_attempts):
        state.attempt_index = attempt
        try:
            return await operation()
        except Exception as exc:
            state.record_failure(exc)
            retryable = should_retry(exc, config)

            logger.warning(
                "Generation attempt failed",
                attempt=attempt + 1,
                total_attempts=total_attempts,
                error_type=type(exc).__name__,
                error=str(exc),
                retryable=retryable,
            )

            if attempt >= config.max_retries or not retryable:
                raise

            delay = compute_backoff_delay(attempt, config)
            retries_total.labels(reason=retry_reason(exc, config)).inc()
            logger.info(
                "Retrying after backoff",
                attempt=attempt + 1,
                delay_seconds=round(delay, 3),
                **describe(config),
            )
            await asyncio.sleep(delay)

    # Unreachable: the final attempt either returns or raises
    raise RuntimeError("call_with_retry exited without a result") from state.last_error
