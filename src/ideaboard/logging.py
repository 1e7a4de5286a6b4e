"""
structlog setup and per-request log context for ideaboard
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any

import structlog

# Values bound while a request is being served; None outside a request
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("graphql_operation", default=None)

_CONTEXT_FIELDS = (
    ("request_id", request_id_ctx),
    ("user_id", user_id_ctx),
    ("graphql_operation", operation_ctx),
)

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "asyncio", "multipart")


def add_request_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor copying the bound request fields into each event.

    Fields the call site already set are left alone.
    """
    del logger, method_name
    for key, var in _CONTEXT_FIELDS:
        value = var.get()
        if value and key not in event_dict:
            event_dict[key] = value
    return event_dict


def _resolve_level(debug: bool, log_level: str | None) -> int:
    if log_level:
        level = logging.getLevelName(log_level.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if debug else logging.INFO


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Route structlog through stdlib logging on stdout.

    Args:
        debug: Coloured console lines when True, one JSON object per line otherwise.
        log_level: Level name such as "warning"; unknown names fall back to the
            debug-derived default.
    """
    level = _resolve_level(debug, log_level)
    logging.basicConfig(level=level, stream=sys.stdout, format="%(message)s", force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def new_request_id() -> str:
    return secrets.token_urlsafe(8)


def set_request_context(request_id: str | None = None, operation: str | None = None) -> str:
    """Start a request's log context and return its request id."""
    request_id = request_id or new_request_id()
    request_id_ctx.set(request_id)
    operation_ctx.set(operation)
    user_id_ctx.set(None)
    return request_id


def bind_user_id(user_id: str | None) -> None:
    """Attach the authenticated caller once the access token has been checked."""
    user_id_ctx.set(user_id)


def bind_operation(operation: str | None) -> None:
    operation_ctx.set(operation)


def clear_request_context() -> None:
    for _, var in _CONTEXT_FIELDS:
        var.set(None)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def get_user_id() -> str | None:
    return user_id_ctx.get()
