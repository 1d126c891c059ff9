"""
Generation client abstraction and the Gemini implementation.

Components:
- BaseLLMClient: Abstract base class for generation clients
- GeminiClient: Gemini generateContent adapter (httpx)
- PromptBuilder: Renders the Jinja2 prompt templates
- exceptions: Client-layer errors carrying status codes for retry classification
"""

from arabic_grammar_gateway.llm.base_client import BaseLLMClient
from arabic_grammar_gateway.llm.exceptions import (
    LLMAuthenticationError,
    LLMClientError,
    LLMConnectionError,
    LLMGenerationError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from arabic_grammar_gateway.llm.gemini_client import GeminiClient
from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "PromptBuilder",
    "LLMAuthenticationError",
    "LLMClientError",
    "LLMConnectionError",
    "LLMGenerationError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
