"""
FastAPI exception handlers for structured error responses.

Maps pipeline failures to HTTP status codes. Every error body has the same
shape: ``{error, message, details?, timestamp}``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from arabic_grammar_gateway.validation.exceptions import (
    GenerationError,
    ResponseFormatError,
    SchemaValidationError,
)

logger = structlog.get_logger(__name__)


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    content["timestamp"] = datetime.now(timezone.utc).isoformat()
    return JSONResponse(status_code=status_code, content=content)


async def generation_error_handler(request: Request, exc: GenerationError) -> JSONResponse:
    """
    Handle generation failures.

    Transient failures that outlived their retries map to 503 so clients
    may try later; fatal upstream errors map to 502.
    """
    logger.error(
        "Generation error",
        error_type=type(exc).__name__,
        retryable=exc.retryable,
        attempts=exc.attempts,
        upstream_status=exc.status_code,
    )

    if exc.retryable:
        return error_response(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "generation_unavailable",
            "AI service is temporarily unavailable, please try again later",
            exc.details,
        )
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "generation_failed",
        "AI service request failed",
        exc.details,
    )


async def response_format_error_handler(
    request: Request, exc: ResponseFormatError
) -> JSONResponse:
    logger.warning("Response format error", details=exc.details)
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "invalid_response_format",
        exc.message,
    )


async def schema_validation_error_handler(
    request: Request, exc: SchemaValidationError
) -> JSONResponse:
    """Maps to 502 with the full violation list."""
    logger.warning(
        "Schema validation error",
        schema=exc.schema_name,
        violation_count=len(exc.violations),
    )
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "schema_validation_failed",
        exc.message,
        exc.details,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle invalid request bodies, path and query parameters.

    Maps to 400 Bad Request (client error).
    """
    details = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.warning("Invalid request format", errors=details)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "invalid_request",
        "Request validation failed",
        details,
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error", error_type=type(exc).__name__, exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    GenerationError: generation_error_handler,
    ResponseFormatError: response_format_error_handler,
    SchemaValidationError: schema_validation_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
