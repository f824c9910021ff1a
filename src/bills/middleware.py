"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, get_request_id, set_request_context

logger = get_logger(__name__)

SENSITIVE_KEYS = {
    "password",
    "token",
    "api_key",
    "secret",
    "auth",
    "authorization",
    "access_token",
    "refresh_token",
    "key",
    "jwt",
    "session",
    "cookie",
    "credentials",
}

# Browsers can send these cross-site without a CORS preflight
SIMPLE_CONTENT_TYPES = {
    "application/x-www-form-urlencoded",
    "multipart/form-data",
    "text/plain",
}
PREFLIGHT_HEADERS = ("x-apollo-operation-name", "apollo-require-preflight")

_OPERATION_RE = re.compile(r"\b(query|mutation)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Redact query parameters whose names look sensitive.

    Args:
        params: Dictionary of query parameters

    Returns:
        Dictionary with sensitive parameters redacted
    """
    sanitized = {}
    for key, value in params.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def operation_name_from_document(query: Any) -> str | None:
    """Derive a loggable operation name from a GraphQL document."""
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _OPERATION_RE.search(query)
    if match:
        kind = "mutation:" if match.group(1) == "mutation" else ""
        return f"{kind}{match.group(2)}"
    return "unnamed_operation"


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != "/graphql":
        return None

    if request.method == "GET":
        data: dict[str, Any] = dict(request.query_params)
    elif request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
    else:
        return None

    op = data.get("operationName")
    if isinstance(op, str) and op:
        return op
    return operation_name_from_document(data.get("query"))


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and set logging context."""
        graphql_operation = await extract_graphql_operation_name(request)
        set_request_context(operation=graphql_operation)

        try:
            sanitized_params = None
            if request.query_params:
                sanitized_params = sanitize_query_params(dict(request.query_params))
                # Never log raw GraphQL payloads from the query string
                if request.url.path == "/graphql":
                    for k in ("query", "variables", "extensions"):
                        if k in sanitized_params:
                            sanitized_params[k] = "[REDACTED]"

            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=sanitized_params,
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            request_id = get_request_id()
            if request_id:
                response.headers["X-Request-ID"] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
            )

            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()


def requires_preflight(request: Request) -> bool:
    """
    Check whether a GraphQL request could have been sent cross-site without a
    CORS preflight.

    A request is safe if it names a non-simple content type or carries one of
    ``PREFLIGHT_HEADERS``. Plain GET page loads without a ``query`` (the IDE)
    are not operations and are never blocked.
    """
    if request.url.path != "/graphql":
        return False
    if request.method == "GET" and "query" not in request.query_params:
        return False
    if request.method not in ("GET", "POST"):
        return False

    if any(request.headers.get(header) for header in PREFLIGHT_HEADERS):
        return False

    content_type = request.headers.get("content-type")
    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type not in SIMPLE_CONTENT_TYPES:
            return False

    return True


class CSRFPreventionMiddleware(BaseHTTPMiddleware):
    """Reject GraphQL operations that a browser could submit cross-site."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if requires_preflight(request):
            logger.warning(
                "GraphQL request blocked by CSRF prevention",
                method=request.method,
                content_type=request.headers.get("content-type"),
            )
            return JSONResponse(
                status_code=400,
                content={
                    "errors": [
                        {
                            "message": (
                                "This operation has been blocked as a potential CSRF. "
                                "Send a non-simple Content-Type such as application/json, "
                                "or one of these headers: " + ", ".join(PREFLIGHT_HEADERS)
                            ),
                            "extensions": {"code": "BAD_REQUEST"},
                        }
                    ]
                },
            )

        return await call_next(request)
