"""
Logging utilities for the OpsDesk backend.

Provides standardized logger configuration and the structured event helper
used by the request pipeline.

CRITICAL SECURITY RULES:
- NEVER log passwords (plain or hashed), JWTs or cookies
- NEVER log secrets loaded from the environment
- Request bodies are logged only through redact_sensitive()

Events are emitted with structlog bound to the standard library: log_event()
hands the event fields to the module's stdlib logger as LogRecord attributes
(request_id, method, url, status_code, duration_ms, ip, user_agent, user_id,
category, ...), so stdlib handlers and tests can read them directly, and the
root handler installed by configure_logging() renders every record as one
JSON object through structlog's ProcessorFormatter.
"""

import logging
from typing import Any, Mapping, Optional

import structlog

# Fields copied from a LogRecord into the structured JSON payload
EVENT_FIELDS = (
    "request_id",
    "method",
    "url",
    "status_code",
    "duration_ms",
    "ip",
    "user_agent",
    "user_id",
    "category",
    "body",
    "params",
    "query",
    "error",
    "fields",
)

SENSITIVE_KEYS = frozenset({
    "password",
    "currentpassword",
    "newpassword",
    "token",
    "access_token",
    "authorization",
})

REDACTED = "[REDACTED]"


def configure_structlog() -> None:
    """Route structlog events to stdlib loggers, event fields as `extra`."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def structured_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering a LogRecord and its event fields as JSON."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.stdlib.ExtraAdder(allow=EVENT_FIELDS),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a JSON console handler.

    Does nothing if the root logger already has handlers (repeated
    create_app() calls, test runners installing their own capture).

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO"), case insensitive
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(structured_formatter())
    root.addHandler(handler)


def get_logger(name: str, level: Optional[int] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the specified module.

    Output goes through the root handler installed by configure_logging(),
    so module loggers carry no handlers of their own.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to INFO)

    Returns:
        structlog logger wrapping the stdlib logger of the same name

    Usage:
        >>> from opsdesk.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred", category="api_request")
    """
    if level is None:
        level = logging.INFO

    logging.getLogger(name).setLevel(level)

    return structlog.stdlib.get_logger(name)


def log_event(
    logger: Any,
    level: int,
    message: str,
    category: Optional[str] = None,
    exc_info: Any = None,
    **context: Any,
) -> None:
    """
    Emit one structured pipeline event.

    None-valued context fields are dropped so optional attributes such as
    user_id only appear when known. A failing sink never propagates into the
    request: any exception raised while emitting is discarded here.

    Args:
        logger: Logger from get_logger()
        level: logging level (logging.INFO, logging.WARNING, ...)
        message: Human-readable event message
        category: Event category (request_start, api_request, performance, error)
        exc_info: Optional exception info forwarded to the logger
        **context: Event fields (request_id, method, url, ...)
    """
    fields = {key: value for key, value in context.items() if value is not None}
    if category is not None:
        fields["category"] = category
    if exc_info is not None:
        fields["exc_info"] = exc_info
    try:
        logger.log(level, message, **fields)
    except Exception:  # noqa: BLE001 - log sink failures never fail a request
        pass


def redact_sensitive(value: Any) -> Any:
    """
    Return a copy of a decoded request payload with secret values masked.

    Dict keys are compared case-insensitively against SENSITIVE_KEYS; lists
    and nested dicts are walked recursively. Other values are returned as-is.
    """
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else redact_sensitive(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_sensitive(item) for item in value]
    return value


if not structlog.is_configured():
    configure_structlog()
