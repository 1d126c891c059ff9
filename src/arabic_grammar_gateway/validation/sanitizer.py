"""
Response sanitizer: strip code fences, then parse strict JSON.

Models often wrap JSON in Markdown fences (```json ... ```), sometimes with
prose around them. Every fence marker is removed wherever it appears, the
result is trimmed and handed to ``json.loads``.
"""

import json
from typing import Any

import structlog

from .exceptions import ResponseFormatError

logger = structlog.get_logger(__name__)

FENCE_MARKERS = ("```json", "```")


def strip_code_fences(text: str) -> str:
    """Remove every ```json and ``` marker and trim surrounding whitespace."""
    for marker in FENCE_MARKERS:
        text = text.replace(marker, "")
    return text.strip()


class ResponseSanitizer:
    """Turns raw model text into an untyped JSON tree."""

    def sanitize(self, raw: str) -> str:
        return strip_code_fences(raw)

    def parse(self, raw: str) -> Any:
        """
        Sanitize and parse ``raw``.

        Returns:
            Parsed JSON value (dict, list or scalar)

        Raises:
            ResponseFormatError: Sanitized text is empty, not valid JSON or
                nested beyond what the decoder can handle
        """
        sanitized = self.sanitize(raw)
        try:
            return json.loads(sanitized)
        except json.JSONDecodeError as e:
            logger.error(
                "Failed to parse AI response",
                parse_error=e.msg,
                line=e.lineno,
                column=e.colno,
                sanitized_snippet=sanitized[:500],
            )
            raise ResponseFormatError(
                raw_content=sanitized,
                parse_error=f"{e.msg} at line {e.lineno} col {e.colno}",
            ) from e
        except RecursionError as e:
            logger.error(
                "Failed to parse AI response",
                parse_error="nesting too deep",
                sanitized_snippet=sanitized[:500],
            )
            raise ResponseFormatError(
                raw_content=sanitized,
                parse_error="JSON nested too deeply to parse",
            ) from e
