"""
Backoff policy: delay computation and retry eligibility.

Everything here is pure apart from the jitter draw. The jitter source can be
injected so tests can pin the delay.

Delay for zero-based attempt ``n``:

    min(max_delay, initial_delay * backoff_factor ** n) * U(0.8, 1.2)

An error is retryable when any configured condition matches it. The default
conditions are a retryable status code (429, 500, 502, 503, 504) or a
transient-overload phrase in the message.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
TRANSIENT_MESSAGE_MARKERS = ("overloaded", "rate limit", "try again later", "timeout")

JITTER_LOW = 0.8
JITTER_SPAN = 0.4


def error_status_code(error: BaseException) -> int | None:
    """
    Extract an HTTP-like status code from an error, if it carries one.

    Looks at ``status_code``, then ``status``, then ``details["status"]``.
    """
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    details = getattr(error, "details", None)
    if isinstance(details, dict):
        value = details.get("status")
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def has_retryable_status(error: BaseException, config: "RetryConfig") -> bool:
    """True if the error carries a status code in the retryable set."""
    status = error_status_code(error)
    return status is not None and status in config.retryable_status_codes


def has_transient_message(error: BaseException, config: "RetryConfig") -> bool:
    """True if the error message mentions overload, rate limiting or a timeout."""
    message = str(error).lower()
    return any(marker in message for marker in config.retryable_messages)


RetryCondition = Callable[[BaseException, "RetryConfig"], bool]

DEFAULT_CONDITIONS: tuple[RetryCondition, ...] = (has_retryable_status, has_transient_message)


@dataclass(frozen=True)
class RetryConfig:
    """
    Immutable retry configuration, safe to share across concurrent requests.

    Attributes:
        max_retries: Retries after the first attempt (total calls = max_retries + 1)
        initial_delay: Delay before the first retry, in seconds
        max_delay: Upper bound on the unjittered delay, in seconds
        backoff_factor: Multiplier applied per attempt (> 1)
        retryable_status_codes: Status codes treated as transient
        retryable_messages: Lower-case message fragments treated as transient
        retryable_conditions: Predicates; an error is retryable if any matches
    """

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_factor: float = 2.0
    retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES
    retryable_messages: tuple[str, ...] = TRANSIENT_MESSAGE_MARKERS
    retryable_conditions: tuple[RetryCondition, ...] = field(default=DEFAULT_CONDITIONS)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})"
            )
        if self.backoff_factor <= 1:
            raise ValueError(f"backoff_factor must be > 1, got {self.backoff_factor}")
        # Normalise so callers may pass any iterable
        object.__setattr__(self, "retryable_status_codes", frozenset(self.retryable_status_codes))
        object.__setattr__(
            self, "retryable_messages", tuple(m.lower() for m in self.retryable_messages)
        )
        object.__setattr__(self, "retryable_conditions", tuple(self.retryable_conditions))


DEFAULT_RETRY_CONFIG = RetryConfig()


def unjittered_delay(attempt: int, config: RetryConfig) -> float:
    """Capped exponential delay for a zero-based attempt index, in seconds."""
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")
    # Exponent grows unbounded; cap before the float overflows
    try:
        raw = config.initial_delay * config.backoff_factor ** attempt
    except OverflowError:
        return config.max_delay
    return min(config.max_delay, raw)


def compute_backoff_delay(
    attempt: int,
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    rng: Callable[[], float] = random.random,
) -> float:
    """
    Delay before the next attempt, with multiplicative jitter in [0.8, 1.2].

    Args:
        attempt: Zero-based index of the attempt that just failed
        config: Retry configuration
        rng: Source of uniform floats in [0, 1)

    Returns:
        Delay in seconds
    """
    return unjittered_delay(attempt, config) * (JITTER_LOW + rng() * JITTER_SPAN)


def should_retry(error: BaseException, config: RetryConfig = DEFAULT_RETRY_CONFIG) -> bool:
    """Whether ``error`` is transient under ``config``."""
    return any(condition(error, config) for condition in config.retryable_conditions)


def retry_reason(error: BaseException, config: RetryConfig) -> str:
    """Metric label describing which rule made the error retryable."""
    if has_retryable_status(error, config):
        return "status"
    if has_transient_message(error, config):
        return "message"
    return "condition"


def describe(config: RetryConfig) -> dict[str, Any]:
    """Loggable view of a config."""
    return {
        "max_retries": config.max_retries,
        "initial_delay": config.initial_delay,
        "max_delay": config.max_delay,
        "backoff_factor": config.backoff_factor,
    }
