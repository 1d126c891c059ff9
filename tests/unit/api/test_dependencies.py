"""
Unit tests for API dependency injection and bearer-token resolution.
"""

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from arabic_grammar_gateway.api.dependencies import (
    get_current_user,
    get_pipeline,
    get_quiz_service,
    require_token_user,
)
from arabic_grammar_gateway.auth.security import create_access_token
from arabic_grammar_gateway.services import QuizService
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.fixture
def strict_settings(test_settings):
    return test_settings.model_copy(update={"AUTH_MODE": "strict"})


@pytest.fixture
def valid_token(test_settings):
    return create_access_token("uid-1", "student@example.com", test_settings.JWT_SECRET)


@pytest.fixture
def expired_token(test_settings):
    return create_access_token(
        "uid-1", "student@example.com", test_settings.JWT_SECRET, expires_minutes=-5
    )


class TestGetCurrentUserStrict:
    """Test strict mode: 401 without a token, 403 with a bad one."""

    def test_valid_token(self, strict_settings, valid_token):
        """Test a good token resolves to the user."""
        user = get_current_user(bearer(valid_token), strict_settings)

        assert user.uid == "uid-1"
        assert user.email == "student@example.com"

    def test_missing_token(self, strict_settings):
        """Test a missing token is 401."""
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(None, strict_settings)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_expired_token(self, strict_settings, expired_token):
        """Test an expired token is 403 with its own message."""
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer(expired_token), strict_settings)

        assert exc_info.value.status_code == 403
        assert "expired" in exc_info.value.detail

    def test_garbage_token(self, strict_settings):
        """Test an unparseable token is 403."""
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer("not-a-jwt"), strict_settings)

        assert exc_info.value.status_code == 403
        assert "Invalid" in exc_info.value.detail

    def test_wrong_secret(self, strict_settings):
        """Test a token signed with another key is 403."""
        token = create_access_token("uid-1", "student@example.com", "other-secret")

        with pytest.raises(HTTPException) as exc_info:
            get_current_user(bearer(token), strict_settings)

        assert exc_info.value.status_code == 403

    def test_mode_is_case_insensitive(self, test_settings):
        """Test "STRICT" behaves like "strict"."""
        settings = test_settings.model_copy(update={"AUTH_MODE": "STRICT"})

        with pytest.raises(HTTPException):
            get_current_user(None, settings)


class TestGetCurrentUserOptional:
    """Test optional mode: bad or missing tokens proceed anonymously."""

    def test_missing_token(self, test_settings):
        assert get_current_user(None, test_settings) is None

    def test_expired_token(self, test_settings, expired_token):
        assert get_current_user(bearer(expired_token), test_settings) is None

    def test_garbage_token(self, test_settings):
        assert get_current_user(bearer("garbage"), test_settings) is None

    def test_valid_token_still_resolved(self, test_settings, valid_token):
        """Test a good token is decoded even when auth is optional."""
        user = get_current_user(bearer(valid_token), test_settings)

        assert user is not None
        assert user.uid == "uid-1"


class TestRequireTokenUser:
    """Test the always-strict check used by /auth/validate-token."""

    def test_valid(self, test_settings, valid_token):
        assert require_token_user(bearer(valid_token), test_settings).uid == "uid-1"

    @pytest.mark.parametrize("token", [None, "garbage"])
    def test_rejected_with_401(self, test_settings, token):
        """Test missing and invalid tokens are both 401, even in optional mode."""
        credentials = bearer(token) if token else None

        with pytest.raises(HTTPException) as exc_info:
            require_token_user(credentials, test_settings)

        assert exc_info.value.status_code == 401

    def test_expired_is_401(self, test_settings, expired_token):
        with pytest.raises(HTTPException) as exc_info:
            require_token_user(bearer(expired_token), test_settings)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"


class TestServiceFactories:
    """Test pipelines and services are wired from settings."""

    def test_pipeline_uses_settings_retry(self, test_settings, scripted_llm):
        """Test the retry configuration comes from settings."""
        client = scripted_llm()
        pipeline = get_pipeline(client, test_settings)

        assert isinstance(pipeline, GenerationPipeline)
        assert pipeline.llm_client is client
        assert pipeline.retry_config.max_retries == test_settings.MAX_RETRIES
        assert pipeline.retry_config.initial_delay == 0.0

    def test_services_share_pipeline(self, test_settings, scripted_llm, prompt_builder):
        pipeline = get_pipeline(scripted_llm(), test_settings)
        service = get_quiz_service(pipeline, prompt_builder)

        assert isinstance(service, QuizService)
        assert service.pipeline is pipeline
        assert service.prompts is prompt_builder
