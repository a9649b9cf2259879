"""
Global exception handlers.

Translates application exceptions, request validation failures and database
integrity errors into the JSON error body ``{"error", "code", "details"}``.
Anything unexpected is logged with its traceback and answered with a generic
500 so internals never leak to the client.
"""

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from staysync.core.exceptions import BaseAppException, ErrorCode
from staysync.core.logging import get_logger

logger = get_logger(__name__)


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "__root__"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    log_extra: Dict[str, Any] = {
        "error_code": exc.error_code.value,
        "status_code": exc.status_code,
        "path": request.url.path,
    }
    if exc.status_code >= 500:
        logger.error(exc.message, extra=log_extra)
    else:
        logger.info(exc.message, extra=log_extra)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Request validation failed",
            "code": ErrorCode.VALIDATION_ERROR.value,
            "details": {"field_errors": _field_errors(exc)},
        },
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(
        "Integrity error",
        extra={"path": request.url.path, "error": str(exc.orig)},
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "Operation conflicts with existing data",
            "code": ErrorCode.DUPLICATE_ENTRY.value,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error: {exc}",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "code": ErrorCode.INTERNAL_ERROR.value},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
