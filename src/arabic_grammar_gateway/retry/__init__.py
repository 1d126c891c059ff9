"""
Retry with exponential backoff for generation calls.

Two pieces:

1. **Backoff Policy** (`policy.py`): pure delay computation and retry
   eligibility for an error.
2. **Retrying Invoker** (`invoker.py`): runs an async zero-argument
   operation up to ``max_retries + 1`` times, sleeping between attempts.

Usage:
    >>> from arabic_grammar_gateway.retry import call_with_retry, RetryConfig
    >>> text = await call_with_retry(lambda: client.generate(prompt), RetryConfig())
"""

from arabic_grammar_gateway.retry.invoker import AttemptState, call_with_retry
from arabic_grammar_gateway.retry.policy import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    compute_backoff_delay,
    error_status_code,
    has_retryable_status,
    has_transient_message,
    should_retry,
    unjittered_delay,
)

__all__ = [
    "AttemptState",
    "DEFAULT_RETRY_CONFIG",
    "RetryConfig",
    "call_with_retry",
    "compute_backoff_delay",
    "error_status_code",
    "has_retryable_status",
    "has_transient_message",
    "should_retry",
    "unjittered_delay",
]
