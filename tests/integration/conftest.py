"""Integration test fixtures.

Apps are built with ``create_app`` around a scripted generation client, so
the full HTTP stack (middleware, auth, pipeline, error handlers) runs
without network access.
"""

from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from arabic_grammar_gateway.main import create_app


@pytest.fixture
def make_api(test_settings, scripted_llm) -> Callable[..., Any]:
    """Factory: ``make_api(*script, healthy=True, **settings_overrides)``.

    Returns ``(TestClient, scripted client)``. The TestClient is entered so
    the application lifespan runs; it is closed after the test.
    """
    opened: list[TestClient] = []

    def _make(*script, healthy: bool = True, raise_server_exceptions: bool = True, **overrides):
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        llm = scripted_llm(*script, healthy=healthy)
        client = TestClient(
            create_app(settings, llm_client=llm),
            raise_server_exceptions=raise_server_exceptions,
        )
        client.__enter__()
        opened.append(client)
        return client, llm

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture
def register_and_login() -> Callable[[TestClient], str]:
    """Register a user on ``client`` and return a bearer token."""

    def _login(client: TestClient, email: str = "student@example.com") -> str:
        client.post("/auth/register", json={"email": email, "password": "secret123"})
        response = client.post("/auth/login", json={"email": email, "password": "secret123"})
        return response.json()["token"]

    return _login
