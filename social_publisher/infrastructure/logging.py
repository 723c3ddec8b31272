"""
Structured logging configuration for the publisher.

Centralized logging setup with:
- Structured JSON output
- Correlation ID tracking
- Timing helper for publish durations
- Access tokens redacted before rendering
"""

import logging
import sys
import time
from contextvars import ContextVar

import structlog

# Context variable for request/job correlation
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Event keys whose values must never reach the log output
SECRET_KEYS = frozenset({"access_token", "db_password"})
REDACTED = "***"


def configure_logging(service_name: str, level: str = "INFO") -> None:
    """
    Configure structured logging for the service.

    Args:
        service_name: Name of the service for log context
        level: Root log level name
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            _add_correlation_id,
            _redact_secrets,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _add_service_name(service_name: str):
    """Processor to add service name to all logs."""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def _add_correlation_id(logger, method_name, event_dict):
    cid = correlation_id.get()
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def _redact_secrets(logger, method_name, event_dict):
    """Processor masking secret values, including inside nested dicts such as request params."""
    return _redact(event_dict)


def _redact(values: dict) -> dict:
    redacted = {}
    for key, value in values.items():
        if key in SECRET_KEYS:
            value = REDACTED
        elif isinstance(value, dict):
            value = _redact(value)
        redacted[key] = value
    return redacted


def set_correlation_id(cid: str) -> None:
    """Set correlation ID for the current context (e.g. from a job trigger)."""
    correlation_id.set(cid)


class Timer:
    """
    Context manager for timing operations.

    Usage:
        with Timer() as t:
            await publisher.publish(post_id)
        logger.info("Publish finished", duration_ms=t.duration_ms)
    """

    def __init__(self):
        self._start: float = 0
        self._end: float = 0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds, rounded to 2 decimal places."""
        return round((self._end - self._start) * 1000, 2)
