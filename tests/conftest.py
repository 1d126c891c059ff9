"""Shared test fixtures and configuration for all tests.

Provides settings, JSON fixtures and a scripted generation client that
replays canned responses and errors in order.
"""

import json
from pathlib import Path
from typing import Any, Callable, Union

import pytest

from arabic_grammar_gateway.config import Settings
from arabic_grammar_gateway.llm.base_client import BaseLLMClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ScriptStep = Union[str, BaseException]


class ScriptedLLMClient(BaseLLMClient):
    """Generation client that replays a fixed script.

    Each ``generate`` call consumes the next step: strings are returned,
    exceptions are raised. Prompts are recorded for assertions.
    """

    def __init__(self, script: list[ScriptStep], healthy: bool = True):
        super().__init__(model="scripted-model", timeout=1.0)
        self.script = list(script)
        self.healthy = healthy
        self.prompts: list[str] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.script:
            raise AssertionError("ScriptedLLMClient ran out of scripted responses")
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults.

    Retry delays are zero so retry paths run instantly; metrics are off so
    several apps can be built in one process.
    """
    return Settings(
        # === Application ===
        APP_NAME="Arabic Grammar Gateway (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        # === Gemini ===
        GEMINI_API_KEY="test-key",
        GEMINI_MODEL="gemini-2.0-flash",
        # === Retry ===
        MAX_RETRIES=3,
        RETRY_INITIAL_DELAY=0.0,
        RETRY_MAX_DELAY=0.0,
        # === Auth ===
        AUTH_MODE="optional",
        JWT_SECRET="test-secret",
        # === Monitoring ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    """Read a fixture file as raw text (what the model would return)."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def load_json_fixture() -> Callable[[str], Any]:
    def _load(name: str) -> Any:
        return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))

    return _load


@pytest.fixture
def scripted_llm() -> Callable[..., ScriptedLLMClient]:
    """Factory for ScriptedLLMClient instances."""

    def _make(*script: ScriptStep, healthy: bool = True) -> ScriptedLLMClient:
        return ScriptedLLMClient(list(script), healthy=healthy)

    return _make
