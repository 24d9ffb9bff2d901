"""
Exception Handlers.

Every failure leaves the API in the same envelope:

    {"success": false, "error": {"code", "message", "details"}, "metadata": {...}}

ApplicationError subclasses carry their own status and code. Request
validation failures become 422 VAL_REQUEST_INVALID; the per-field list is
included only while ``features.api_detailed_errors`` is on. Starlette's own
HTTP errors (unknown route, wrong method) are wrapped too, and anything else
is a 500 with no internals exposed.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkline.backend.core import exceptions
from inkline.backend.core.exceptions import ApplicationError
from inkline.backend.core.logging import get_logger
from inkline.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    cls: cls.status_code
    for cls in (
        exceptions.NotFoundError,
        exceptions.ValidationError,
        exceptions.AuthenticationError,
        exceptions.FeatureDisabledError,
        exceptions.ConflictError,
        exceptions.QuotaExceededError,
        exceptions.DatabaseError,
    )
}

HTTP_STATUS_CODES = {
    401: "AUTH_UNAUTHORIZED",
    403: "AUTHZ_FORBIDDEN",
    404: "RES_NOT_FOUND",
    405: "HTTP_METHOD_NOT_ALLOWED",
}


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id")


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    envelope = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or None),
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json"),
        headers=headers,
    )


def _detailed_errors() -> bool:
    from inkline.backend.core.config import get_app_config

    return get_app_config().features.api_detailed_errors


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = exc.status_code
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Application error",
        extra={
            "code": exc.code,
            "status": status_code,
            "path": request.url.path,
            "method": request.method,
            "request_id": _get_request_id(request),
        },
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return _error_response(request, status_code, exc.code, exc.message, exc.details, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(errors)},
    )

    details = None
    if _detailed_errors():
        details = {
            "validation_errors": [
                {
                    "field": ".".join(str(part) for part in err.get("loc", ())),
                    "message": err.get("msg", "Validation error"),
                    "type": err.get("type", "unknown"),
                }
                for err in errors
            ]
        }
    return _error_response(request, 422, "VAL_REQUEST_INVALID", "Request validation failed", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, f"HTTP_{exc.status_code}")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(request, exc.status_code, code, message, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": _get_request_id(request),
        },
    )
    return _error_response(request, 500, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
