"""Structured logging configuration using structlog."""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from src.config.settings import settings


def add_session_id_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add [SESSION_ID] prefix to log message if session_id is present.

    Runs before the renderer so the prefix shows up in JSON and console
    output alike, which lets one request's lines be grepped together.

    Args:
        logger: The logger instance
        method_name: The name of the method being called
        event_dict: The event dictionary containing log data

    Returns:
        Modified event dictionary with session id prefix
    """
    session_id = event_dict.get("session_id")
    if session_id:
        current_event = event_dict.get("event", "")
        event_dict["event"] = f"[{session_id}] {current_event}"
    return event_dict


def add_service_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Tag every event with environment and the configured accommodation."""
    event_dict.setdefault("environment", settings.environment)
    event_dict.setdefault("accommodation_id", settings.feratel_accommodation_id())
    return event_dict


def _build_handler(log_level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if settings.logging.format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler.setLevel(log_level)
    return handler


def configure_logging() -> None:
    """Configure structlog and route uvicorn's loggers through the root handler."""

    log_level = getattr(logging, settings.logging.level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(log_level))

    # uvicorn installs its own handlers unless log_config=None
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    if not settings.logging.access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    # Outbound calls are logged by the Feratel client itself
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_service_context,
            add_session_id_prefix,
            structlog.processors.JSONRenderer()
            if settings.logging.format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Logger for a module, typically called with __name__."""
    return structlog.get_logger(name)
