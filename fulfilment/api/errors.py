"""Unified error handling — every failure → ``{exceptionType, code, error?}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fulfilment.services import (
    ConflictError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

log = structlog.get_logger(__name__)

_STATUS_MAP: dict[type[ServiceError], int] = {
    NotFoundError: 404,
    ConflictError: 409,
    ValidationError: 422,
}


def exception_type(exc: BaseException) -> str:
    """Fully-qualified class name of *exc* (bare name for builtins)."""
    cls = type(exc)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def status_for(exc: BaseException) -> int:
    """HTTP status carried by *exc*, or 500 for unclassified failures."""
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code
    if isinstance(exc, RequestValidationError):
        return 422
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return 500


def error_body(exc: BaseException, code: int, message: str | None = None) -> dict:
    body: dict = {"exceptionType": exception_type(exc), "code": code}
    if message is None:
        message = str(exc)
    if message:
        body["error"] = message
    return body


def to_response(
    exc: BaseException,
    message: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Log *exc* and translate it into the JSON error response."""
    code = status_for(exc)
    log.error(
        "request.failed",
        exception_type=exception_type(exc),
        code=code,
        exc_info=exc if code >= 500 else None,
    )
    return JSONResponse(
        status_code=code, content=error_body(exc, code, message), headers=headers
    )


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return "; ".join(messages)


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return to_response(exc)


async def _http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else None
    return to_response(exc, message=detail or "", headers=getattr(exc, "headers", None))


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return to_response(exc, message=_validation_message(exc))


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    return to_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
