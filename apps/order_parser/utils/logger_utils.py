"""Logging utilities with required fields and phrase truncation."""
import logging
import uuid
from typing import Optional, Dict, Any

import structlog

logger = structlog.get_logger()


def configure_logging(level: str = "INFO"):
    """
    Configure structured logging for command line and service use.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ...)
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger_with_context(
    phrase_id: Optional[str] = None,
    event_type: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Get logger with required context fields.

    Args:
        phrase_id: Caller-side identifier of the phrase (chat message id, etc.)
        event_type: Event type (required for all events)

    Returns:
        Bound logger with context
    """
    context: Dict[str, Any] = {"event_type": event_type or "unknown"}

    if phrase_id:
        context["phrase_id"] = phrase_id

    # Generate event_id for tracking
    context["event_id"] = str(uuid.uuid4())

    return logger.bind(**context)


def sanitize_for_logging(data: Any, max_length: int = 200) -> Any:
    """
    Truncate long strings, recursively, before they reach the log.

    Args:
        data: Data to sanitize
        max_length: Maximum length for strings

    Returns:
        Sanitized data
    """
    if isinstance(data, str):
        if len(data) > max_length:
            return data[:max_length] + "..."
        return data
    elif isinstance(data, dict):
        return {key: sanitize_for_logging(value, max_length) for key, value in data.items()}
    elif isinstance(data, (list, tuple)):
        return [sanitize_for_logging(item, max_length) for item in data]
    else:
        return data


def log_event(
    event_type: str,
    phrase_id: Optional[str] = None,
    level: str = "info",
    max_length: int = 200,
    **kwargs
):
    """
    Log event with required fields.

    Args:
        event_type: Event type (required)
        phrase_id: Phrase identifier (optional)
        level: Log level (info, warning, error, debug)
        max_length: Maximum length for string fields
        **kwargs: Additional log fields
    """
    log = get_logger_with_context(phrase_id=phrase_id, event_type=event_type)

    sanitized_kwargs = sanitize_for_logging(kwargs, max_length)

    log_method = getattr(log, level.lower(), log.info)
    log_method(event_type, **sanitized_kwargs)
