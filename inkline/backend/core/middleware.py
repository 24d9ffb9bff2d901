"""
Request Context Middleware.

Tags each request with an id and the calling frontend. Both are bound to
structlog's context for the request's lifetime and echoed in the response
headers along with the handling time.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from inkline.backend.core.logging import VALID_SOURCES, get_logger

logger = get_logger(__name__)

KNOWN_FRONTENDS = VALID_SOURCES - {"unknown"}

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health", "/health/ready"})


def _resolve_frontend(request: Request) -> str:
    frontend = request.headers.get("X-Frontend-ID", "").strip().lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


def _request_logging_enabled(path: str) -> bool:
    if path in QUIET_PATHS:
        return False
    from inkline.backend.core.config import get_app_config

    return get_app_config().features.api_request_logging


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Sets ``request.state.request_id`` and ``request.state.frontend``.

    Response headers: X-Request-ID (the caller's own when it sent one) and
    X-Response-Time in milliseconds.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _resolve_frontend(request)
        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        log_requests = _request_logging_enabled(request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Unhandled exception in request",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        elapsed = _elapsed_ms(started)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed}ms"
        if log_requests:
            logger.info(
                "Request handled",
                extra={
                    "request_id": request_id,
                    "frontend": frontend,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": elapsed,
                },
            )
        return response


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
