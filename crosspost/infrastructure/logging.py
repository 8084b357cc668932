"""
Structured logging for the publish service.

JSON lines on stdout via structlog, stamped with the service name and the
request's correlation ID. Credential values are masked before rendering.
"""

import logging
import sys
import time
from contextvars import ContextVar
from uuid import uuid4

import structlog

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Event keys whose values are secrets wherever they appear
SECRET_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "client_secret",
        "page_access_token",
        "api_secret",
        "access_secret",
    }
)


def configure_logging(service_name: str, debug: bool = False) -> None:
    """
    Configure stdlib logging and structlog for the service.

    Args:
        service_name: Added to every event as ``service``
        debug: Emit DEBUG events (raw provider responses, token checks)
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _stamp(service_name),
            _mask_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _stamp(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        cid = correlation_id.get()
        if cid:
            event_dict.setdefault("correlation_id", cid)
        return event_dict

    return processor


def _mask_secrets(logger, method_name, event_dict):
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = sanitize_for_logging(str(event_dict[key]))
    return event_dict


def get_correlation_id() -> str:
    """Return the current correlation ID, creating one outside a request."""
    cid = correlation_id.get()
    if not cid:
        cid = str(uuid4())
        correlation_id.set(cid)
    return cid


def set_correlation_id(cid: str) -> None:
    correlation_id.set(cid)


class Timer:
    """Wall-clock timer used as a context manager around outbound calls."""

    def __init__(self) -> None:
        self._started = 0.0
        self._elapsed = 0.0

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc) -> None:
        self._elapsed = time.perf_counter() - self._started

    @property
    def duration_ms(self) -> float:
        return round(self._elapsed * 1000, 2)


def sanitize_for_logging(value: str | None, visible_chars: int = 8) -> str:
    """
    Mask a secret, keeping a short prefix to tell tokens apart.

    Values no longer than ``visible_chars`` are masked completely.
    """
    if not value:
        return ""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return f"{value[:visible_chars]}..."
