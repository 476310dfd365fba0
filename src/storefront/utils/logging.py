"""Logging for the storefront.

Records go through the standard library (stdout, plus a rotating file outside
tests) and are rendered by structlog: JSON in production and staging, a rich
console everywhere else. Every line logged while serving a request carries
that request's id and the shopper's session.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from uuid import uuid4

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_NOISY_LOGGERS = ("protean", "asyncio", "uvicorn.access")

_SECRET_FIELDS = frozenset({"password", "confirm_password", "password_hash", "token"})

# Session ids are bearer credentials once signed in; only this much is logged
_SESSION_PREFIX_LENGTH = 8


def get_environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(get_environment(), "INFO"))


def redact_secrets(logger, method_name, event_dict):
    for field in _SECRET_FIELDS & event_dict.keys():
        event_dict[field] = "[redacted]"
    return event_dict


def shorten_session_id(logger, method_name, event_dict):
    session_id = event_dict.get("session_id")
    if session_id is not None:
        event_dict["session_id"] = str(session_id)[:_SESSION_PREFIX_LENGTH]
    return event_dict


def _handlers(log_dir: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir and get_environment() != "test":
        path = Path(log_dir)
        path.mkdir(exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=path / "storefront.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(log_dir: str | None = "logs") -> None:
    """Route stdlib logging through structlog's renderer."""
    level = get_log_level()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(log_dir)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        shorten_session_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if get_environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(method: str, path: str, session_id: str | None = None) -> str:
    """Start a fresh log context for one request and return its request id."""
    structlog.contextvars.clear_contextvars()
    request_id = uuid4().hex[:12]
    context = {"request_id": request_id, "method": method, "path": path}
    if session_id:
        context["session_id"] = session_id
    structlog.contextvars.bind_contextvars(**context)
    return request_id
