"""Structured logging for the gateway.

Every event carries the service name and version. Credentials that end up in
event fields (the Gemini key, bearer tokens, passwords) are masked before
rendering, whether the event came from structlog or from a stdlib logger such
as uvicorn's. The renderer is JSON or console, picked by ``LOG_FORMAT`` and
defaulting to JSON in production.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "arabic-grammar-gateway"

SENSITIVE_KEYS = frozenset(
    {"api_key", "authorization", "password", "token", "access_token", "secret_key"}
)
REDACTED = "***"

# Library loggers and the level they are held at
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "asyncio": logging.WARNING,
    "passlib": logging.ERROR,
    "multipart": logging.WARNING,
}

# Handled by the root handler instead of their own
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class ServiceContext:
    """Processor stamping the service name and version on each event."""

    def __init__(self, version: str):
        self.version = version

    def __call__(
        self, logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("version", self.version)
        return event_dict


def redact_secrets(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential-bearing fields, one level into dict values too."""
    for key, value in event_dict.items():
        if key.lower() in SENSITIVE_KEYS:
            if value:
                event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {
                k: REDACTED if isinstance(k, str) and k.lower() in SENSITIVE_KEYS and v else v
                for k, v in value.items()
            }
    return event_dict


def resolve_format(environment: str, log_format: Optional[str] = None) -> str:
    """``json`` or ``console``; an unset or unknown format follows the environment."""
    if log_format and log_format.lower() in ("json", "console"):
        return log_format.lower()
    return "json" if environment.lower() == "production" else "console"


def build_processors(version: str) -> list[Processor]:
    """Processors shared by structlog loggers and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        ServiceContext(version),
        redact_secrets,
    ]


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    *,
    log_format: Optional[str] = None,
    version: str = "0.0.0",
) -> None:
    """Configure structlog and route stdlib logging (uvicorn included) through it.

    Safe to call more than once: the root logger ends up with exactly one
    handler, the one installed by the latest call.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    fmt = resolve_format(environment, log_format)
    shared_processors = build_processors(version)

    if fmt == "json":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer, foreign_pre_chain=shared_processors
        )
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    structlog.get_logger(__name__).info(
        "Logging configured", log_level=logging.getLevelName(level), renderer=fmt
    )
