"""
Abstract base client for text generation.

The pipeline depends only on this interface, so the Gemini adapter can be
swapped for a fake in tests or another provider later.
"""

from abc import ABC, abstractmethod

import structlog

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for generation clients.

    Responsibilities:
    - Send exactly one generation request per ``generate`` call
    - Map transport and provider failures onto ``LLMClientError`` subclasses

    Does NOT handle:
    - Retries (that's the retrying invoker's job)
    - Sanitizing, repairing or validating output (that's the pipeline's job)
    """

    def __init__(self, model: str, timeout: float = 60.0):
        self.model = model
        self.timeout = timeout

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            model=model,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Generate a completion for ``prompt`` and return the raw text.

        Raises:
            LLMConnectionError: Network failure
            LLMTimeoutError: Request exceeded timeout
            LLMRateLimitError: Provider returned 429
            LLMAuthenticationError: Missing or rejected credentials
            LLMGenerationError: Any other provider-side failure
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability check.

        Must not raise; return False on any failure.
        """

    async def close(self) -> None:
        """Release pooled connections. Default does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    async def __aenter__(self) -> "BaseLLMClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model}, timeout={self.timeout}s)"
