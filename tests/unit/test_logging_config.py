"""
Unit tests for the structlog configuration.
"""

import json
import logging

import pytest

from arabic_grammar_gateway.logging_config import (
    QUIET_LOGGERS,
    REDACTED,
    SERVICE_NAME,
    ServiceContext,
    configure_logging,
    redact_secrets,
    resolve_format,
)


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestProcessors:
    """Test the project-specific processors."""

    def test_secrets_masked(self):
        """Test credential fields are masked and others left alone."""
        event = redact_secrets(
            None,
            "info",
            {"event": "login", "password": "hunter2", "API_KEY": "AIza-secret", "email": "a@b.c"},
        )

        assert event["password"] == REDACTED
        assert event["API_KEY"] == REDACTED
        assert event["email"] == "a@b.c"
        assert event["event"] == "login"

    def test_nested_headers_masked(self):
        """Test secrets one level down (request headers) are masked."""
        event = redact_secrets(
            None,
            "info",
            {"headers": {"Authorization": "Bearer abc", "Accept": "application/json"}},
        )

        assert event["headers"] == {"Authorization": REDACTED, "Accept": "application/json"}

    def test_empty_secret_left_visible(self):
        """Test an unset key stays falsy so 'not configured' is still readable."""
        event = redact_secrets(None, "info", {"api_key": ""})
        assert event["api_key"] == ""

    def test_service_context(self):
        """Test service name and version are stamped without overriding."""
        stamp = ServiceContext("1.2.3")

        assert stamp(None, "info", {"event": "x"}) == {
            "event": "x",
            "service": SERVICE_NAME,
            "version": "1.2.3",
        }
        assert stamp(None, "info", {"version": "other"})["version"] == "other"


class TestResolveFormat:
    """Test renderer selection."""

    @pytest.mark.parametrize(
        "environment,log_format,expected",
        [
            ("production", None, "json"),
            ("development", None, "console"),
            ("development", "JSON", "json"),
            ("production", "console", "console"),
            ("production", "xml", "json"),
        ],
    )
    def test_resolve(self, environment, log_format, expected):
        """Test explicit formats win and unknown ones follow the environment."""
        assert resolve_format(environment, log_format) == expected


class TestConfigureLogging:
    """Test handler installation."""

    def test_repeated_calls_keep_one_handler(self, restore_root_logger):
        """Test reconfiguring replaces the root handler instead of stacking."""
        configure_logging("DEBUG", "development")
        configure_logging("WARNING", "production")

        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        """Test a bogus level name does not break startup."""
        configure_logging("LOUD", "development")
        assert restore_root_logger.level == logging.INFO

    def test_library_loggers_quieted(self, restore_root_logger):
        """Test noisy libraries are held at their configured levels."""
        configure_logging("DEBUG", "development")

        for name, level in QUIET_LOGGERS.items():
            assert logging.getLogger(name).level == level
        assert logging.getLogger("passlib").level == logging.ERROR

    def test_uvicorn_records_rendered_as_json(self, restore_root_logger):
        """Test stdlib records get the service context through the shared chain."""
        configure_logging("INFO", "development", log_format="json", version="9.9.9")

        assert logging.getLogger("uvicorn.access").propagate is True
        record = logging.LogRecord(
            "uvicorn.error", logging.INFO, __file__, 1, "Application startup complete.", None, None
        )
        rendered = json.loads(restore_root_logger.handlers[0].format(record))

        assert rendered["event"] == "Application startup complete."
        assert rendered["logger"] == "uvicorn.error"
        assert rendered["level"] == "info"
        assert rendered["service"] == SERVICE_NAME
        assert rendered["version"] == "9.9.9"
