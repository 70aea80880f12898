"""structlog setup shared by the API and the arq worker."""

import logging
import sys
from decimal import Decimal
from typing import Any

import structlog

SERVICE_NAME = "global-pocket-api"


def _decimals_as_str(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Money fields are logged exactly as stored
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
    return event_dict


def configure_logging(debug: bool = False, component: str = "api") -> None:
    """Console output in debug, one JSON object per line otherwise."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _decimals_as_str,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME, component=component)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def bind_request_id(request_id: str) -> None:
    """Start a fresh per-request context; owner_id from a previous request must not leak in."""
    structlog.contextvars.unbind_contextvars("owner_id")
    structlog.contextvars.bind_contextvars(request_id=request_id)


def bind_owner_id(owner_id: str) -> None:
    structlog.contextvars.bind_contextvars(owner_id=owner_id)
