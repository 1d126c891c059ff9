"""
Gemini client implementation for text generation.

Talks to the Generative Language REST API with a pooled httpx AsyncClient:
- POST /models/{model}:generateContent
- GET /models/{model} (health check)

Single-shot by contract: one ``generate`` call is one HTTP request. Failures
are mapped onto ``LLMClientError`` subclasses that keep the status code and
the provider's message, so the backoff policy can classify them.
"""

import time
from typing import Any, Optional

import httpx
import structlog

from arabic_grammar_gateway.llm.base_client import BaseLLMClient
from arabic_grammar_gateway.llm.exceptions import (
    LLMAuthenticationError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from arabic_grammar_gateway.monitoring.metrics import llm_latency_seconds

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient(BaseLLMClient):
    """
    Gemini ``generateContent`` adapter.

    Request body:
    {
        "contents": [{"parts": [{"text": "..."}]}],
        "generationConfig": {"temperature": 0.4, "maxOutputTokens": 8192}
    }

    Response body (abridged):
    {
        "candidates": [{"content": {"parts": [{"text": "..."}]}, "finishReason": "STOP"}],
        "promptFeedback": {"blockReason": "SAFETY"}
    }
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        temperature: float = 0.4,
        max_output_tokens: int = 8192,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Generative Language API key
            model: Model name (e.g. gemini-2.0-flash)
            base_url: API root, without trailing slash
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_output_tokens: Generation length cap
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(model=model, timeout=timeout)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
                transport=self._transport,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }

    async def generate(self, prompt: str) -> str:
        """Send one generateContent request and return the candidate text."""
        if not self.api_key:
            raise LLMAuthenticationError(
                "Gemini API key is not configured",
                details={"model": self.model},
            )

        start_time = time.perf_counter()
        logger.info(
            "Sending generation request to Gemini",
            model=self.model,
            prompt_length=len(prompt),
        )

        try:
            response = await self._get_client().post(
                f"/models/{self.model}:generateContent",
                json=self.build_payload(prompt),
                headers=self._headers(),
            )
            response.raise_for_status()
            text = self._extract_text(response)
        except httpx.TimeoutException as e:
            self._observe(start_time, success=False)
            raise LLMTimeoutError(
                f"Gemini request timeout after {self.timeout}s",
                details={"timeout": self.timeout, "error_type": type(e).__name__},
            ) from e
        except httpx.HTTPStatusError as e:
            self._observe(start_time, success=False)
            raise self._map_status_error(e.response) from e
        except httpx.RequestError as e:
            self._observe(start_time, success=False)
            raise LLMConnectionError(
                f"Network error: {e}",
                details={"error_type": type(e).__name__},
            ) from e
        except LLMGenerationError:
            self._observe(start_time, success=False)
            raise

        latency = self._observe(start_time, success=True)
        logger.info(
            "Gemini generation successful",
            model=self.model,
            latency_ms=int(latency * 1000),
            response_length=len(text),
        )
        return text

    def _observe(self, start_time: float, success: bool) -> float:
        latency = time.perf_counter() - start_time
        llm_latency_seconds.labels(
            model=self.model, success="true" if success else "false"
        ).observe(latency)
        return latency

    def _map_status_error(self, response: httpx.Response) -> Exception:
        """Translate an HTTP error response into the matching client error."""
        status_code = response.status_code
        provider_message = _provider_message(response)
        message = f"Gemini API error {status_code}: {provider_message}"
        details = {"model": self.model, "provider_message": provider_message}

        logger.error("Gemini HTTP error", status_code=status_code, provider_message=provider_message)

        if status_code == 429:
            return LLMRateLimitError(message, details=details, status_code=status_code)
        if status_code in (401, 403):
            return LLMAuthenticationError(message, details=details, status_code=status_code)
        return LLMGenerationError(message, details=details, status_code=status_code)

    def _extract_text(self, response: httpx.Response) -> str:
        try:
            data = response.json()
        except (ValueError, RecursionError) as e:
            raise LLMGenerationError(
                "Invalid JSON envelope from Gemini",
                details={"parse_error": str(e), "body": response.text[:500]},
            ) from e
        if not isinstance(data, dict):
            raise LLMGenerationError(
                "Unexpected Gemini envelope", details={"body": response.text[:500]}
            )

        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise LLMGenerationError(
                f"Prompt blocked by Gemini: {block_reason}",
                details={"block_reason": block_reason},
            )

        candidates = data.get("candidates")
        if (
            not isinstance(candidates, list)
            or not candidates
            or not isinstance(candidates[0], dict)
        ):
            raise LLMGenerationError("Gemini returned no candidates", details={"response": data})

        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text:
            raise LLMGenerationError(
                "Empty response from Gemini",
                details={"finish_reason": candidates[0].get("finishReason")},
            )
        return text

    async def health_check(self) -> bool:
        """Fetch the model resource; True on 200."""
        if not self.api_key:
            return False
        try:
            response = await self._get_client().get(
                f"/models/{self.model}", headers=self._headers(), timeout=5.0
            )
        except httpx.HTTPError as e:
            logger.warning("Gemini health check failed", error=str(e))
            return False
        return response.status_code == 200

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.info("Closed Gemini HTTP client")
        self._client = None


def _provider_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of a Gemini error body, falling back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return response.text[:500]
