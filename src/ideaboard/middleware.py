"""
Request logging middleware
"""

import json
import re
import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "x-request-id"

# Substrings that mark a query parameter as sensitive
SENSITIVE_KEYS = frozenset(
    {"password", "token", "secret", "auth", "key", "jwt", "session", "cookie", "credential"}
)

# GET /graphql carries the whole document and its variables in the query string
_GRAPHQL_PARAMS = ("query", "variables", "extensions")

_OPERATION_RE = re.compile(r"\b(query|mutation|subscription)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Replace the value of every parameter whose name looks sensitive."""
    return {
        key: "[REDACTED]" if any(marker in key.lower() for marker in SENSITIVE_KEYS) else value
        for key, value in params.items()
    }


def operation_name_from_payload(payload: dict[str, Any]) -> str | None:
    """Name a GraphQL request for the logs.

    Uses ``operationName`` when given, otherwise the name declared in the
    document. Mutations and subscriptions are prefixed with their kind.
    """
    name = payload.get("operationName")
    if isinstance(name, str) and name:
        return name

    document = payload.get("query")
    if not isinstance(document, str) or not document:
        return None
    if "__schema" in document or "IntrospectionQuery" in document:
        return "__introspection"

    match = _OPERATION_RE.search(document)
    if match is None:
        return "unnamed_operation"
    kind, name = match.groups()
    return name if kind == "query" else f"{kind}:{name}"


async def _graphql_payload(request: Request) -> dict[str, Any] | None:
    if request.method == "GET":
        return dict(request.query_params)
    if request.method != "POST":
        return None
    # Starlette caches the body so the GraphQL router can still read it
    body = await request.body()
    if not body:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return data if isinstance(data, dict) else None


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != "/graphql":
        return None
    payload = await _graphql_payload(request)
    return operation_name_from_payload(payload) if payload else None


def _loggable_query_params(request: Request) -> dict[str, Any] | None:
    if not request.query_params:
        return None
    params = sanitize_query_params(dict(request.query_params))
    if request.url.path == "/graphql":
        for key in _GRAPHQL_PARAMS:
            if key in params:
                params[key] = "[REDACTED]"
    return params


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id and the GraphQL operation to every log line of a request.

    The request id is taken from an incoming ``x-request-id`` header when
    present and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        operation = await extract_graphql_operation_name(request)
        request_id = set_request_context(
            request_id=request.headers.get(REQUEST_ID_HEADER), operation=operation
        )

        try:
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=_loggable_query_params(request),
                remote_addr=request.client.host if request.client else None,
            )
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            clear_request_context()
