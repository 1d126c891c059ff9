"""
Pipeline failure classes.

Each failure carries a ``kind`` so an HTTP-facing caller can pick a status
code without knowing how the pipeline works:

- ``upstream``: generation failed (retries exhausted or non-retryable error)
- ``format``: the model output was not parseable JSON
- ``schema``: the parsed output violated its declared schema
"""

from typing import Any


class PipelineError(Exception):
    """
    Base exception for all pipeline failures.

    Attributes:
        message: Human-readable error description
        details: Structured error data for logging and responses
    """

    kind = "pipeline"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class GenerationError(PipelineError):
    """
    The generation service did not produce a response.

    ``retryable`` is True when the final error was transient and retries ran
    out; False when the error was fatal on its own (bad request, auth).
    """

    kind = "upstream"

    def __init__(
        self,
        message: str,
        retryable: bool,
        attempts: int,
        status_code: int | None = None,
        cause_type: str | None = None,
    ):
        details: dict[str, Any] = {"retryable": retryable, "attempts": attempts}
        if status_code is not None:
            details["status_code"] = status_code
        if cause_type:
            details["cause"] = cause_type
        super().__init__(message, details)
        self.retryable = retryable
        self.attempts = attempts
        self.status_code = status_code


class ResponseFormatError(PipelineError):
    """
    The sanitized model output is not valid JSON.

    Deterministic for a given response, so it is never retried.
    """

    kind = "format"

    def __init__(
        self,
        message: str = "AI response format invalid",
        raw_content: str | None = None,
        parse_error: str | None = None,
    ):
        details: dict[str, Any] = {}
        if raw_content is not None:
            # Keep logs bounded
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error
        super().__init__(message, details)
        self.raw_content = raw_content


class SchemaValidationError(PipelineError):
    """The parsed, repaired payload does not conform to its schema."""

    kind = "schema"

    def __init__(self, message: str, schema_name: str, violations: tuple = ()):
        super().__init__(
            message,
            {
                "schema": schema_name,
                "violations": [{"path": v.path, "message": v.message} for v in violations],
            },
        )
        self.schema_name = schema_name
        self.violations = tuple(violations)
