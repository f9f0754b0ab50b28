"""Structured logging configuration for Dockwright.

This module provides structlog-based logging with:
- JSON output when env var DOCKWRIGHT_LOG_FORMAT=json
- Pretty console output by default
- Redaction of credential-like fields before any renderer sees them

Logs always go to stderr so they never interleave with prompts or with
rendered workflow text printed to stdout.

Usage:
    from dockwright.logging import get_logger, configure_logging

    configure_logging()

    log = get_logger(__name__)
    log = log.bind(repository="acme/api")
    log.info("workflow_written", path=".github/workflows/ci.yml")
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from pydantic import SecretStr
from structlog.types import EventDict, Processor, WrappedLogger

__all__ = [
    "get_logger",
    "configure_logging",
    "redact_secrets",
    "REDACTED",
]

LOG_FORMAT_ENV_VAR = "DOCKWRIGHT_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "DOCKWRIGHT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

#: Placeholder written in place of redacted values
REDACTED = "**********"

#: Substrings that mark an event key as carrying a credential
SENSITIVE_KEY_PARTS: tuple[str, ...] = ("token", "password", "secret_value", "body")


def _get_log_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def redact_secrets(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace credential values in an event before rendering.

    Any ``SecretStr`` value is redacted regardless of its key. Plain values
    are redacted when the key contains one of ``SENSITIVE_KEY_PARTS``.

    Args:
        logger: Wrapped logger (unused, part of the processor protocol).
        method_name: Log method name (unused).
        event_dict: Event being processed.

    Returns:
        The event dict with sensitive values replaced by ``REDACTED``.
    """
    redacted: MutableMapping[str, Any] = event_dict
    for key, value in list(redacted.items()):
        if key == "event":
            continue
        if isinstance(value, SecretStr):
            redacted[key] = REDACTED
            continue
        lowered = key.lower()
        if value and any(part in lowered for part in SENSITIVE_KEY_PARTS):
            redacted[key] = REDACTED
    return event_dict


def _get_shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _get_renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; each call replaces the previous handler.

    Args:
        force_json: Force JSON output regardless of DOCKWRIGHT_LOG_FORMAT.
        level: Override log level. If None, reads DOCKWRIGHT_LOG_LEVEL
            (default WARNING, so an interactive run stays quiet).
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    exc_processor: Processor = (
        structlog.processors.dict_tracebacks
        if use_json
        else structlog.processors.format_exc_info
    )

    structlog.configure(
        processors=[
            *_get_shared_processors(),
            exc_processor,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _get_renderer(use_json),
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )
    root_logger.addHandler(handler)

    # GitPython logs every command at DEBUG; keep it one level quieter.
    logging.getLogger("git").setLevel(max(log_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        A bound structlog logger.
    """
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log

