"""
Exceptions for the generation client layer.

Every error keeps whatever the backoff policy needs to classify it: a
``status_code`` when the provider returned one, and the provider's own
message (which may mention overload, rate limiting or a timeout).
"""


class LLMClientError(Exception):
    """
    Base exception for all generation client errors.

    Attributes:
        message: Human-readable description, including the provider message
        details: Structured data for logging (status, provider payload)
        status_code: HTTP status returned by the provider, if any
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        if status_code is not None:
            self.details.setdefault("status", status_code)


class LLMConnectionError(LLMClientError):
    """Unable to reach the provider (DNS, refused connection, reset)."""
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    The request exceeded the configured timeout.

    The message always contains "timeout" so the transient-message rule
    retries it.
    """
    pass


class LLMRateLimitError(LLMClientError):
    """Provider rejected the request with 429."""
    pass


class LLMAuthenticationError(LLMClientError):
    """Missing or rejected API key (401/403). Never retried."""
    pass


class LLMGenerationError(LLMClientError):
    """
    Provider returned an error status or an unusable response.

    Examples:
    - 400 invalid argument
    - 500/503 internal or overloaded
    - prompt blocked by safety filters
    - no candidates in the response
    """
    pass
