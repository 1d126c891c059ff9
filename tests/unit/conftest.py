"""Unit test fixtures (configs, builders and pipelines around fakes)."""

import pytest

from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.retry.policy import RetryConfig


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Three retries with zero backoff so retry paths never sleep."""
    return RetryConfig(max_retries=3, initial_delay=0.0, max_delay=0.0)


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """PromptBuilder over the bundled templates."""
    return PromptBuilder()
