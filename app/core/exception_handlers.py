"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and store
exceptions to HTTP responses with a user-facing message; the technical
message stays in details.reason.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import HousingException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "UNAUTHENTICATED": 401,
    "PERMISSION_DENIED": 403,
    "RESOURCE_NOT_FOUND": 404,
    "DOCUMENT_EXISTS": 409,
    "MALFORMED_DOCUMENT": 422,
    "PARTIAL_CASCADE_FAILURE": 502,
    "RECALCULATION_FAILED": 502,
    "STORE_ERROR": 502,
    "UNAVAILABLE": 503,
    "PRECONDITION_FAILED": 500,
}

# User-facing messages for store failures (the raw store message goes to details).
_USER_MESSAGES: dict[str, str] = {
    "UNAVAILABLE": "The database is temporarily unavailable. Please try again in a few moments.",
    "UNAUTHENTICATED": "Session expired. Please sign in again.",
    "PRECONDITION_FAILED": "The database is not correctly configured.",
    "STORE_ERROR": "The database request failed.",
}
_SIGNED_OUT_MESSAGE = "You must be signed in to access the data. Please sign in again."
_FORBIDDEN_MESSAGE = (
    "Insufficient permissions for this data. Contact an administrator if needed."
)


def _status_for(exc: HousingException) -> int:
    if exc.error_code == "PRECONDITION_FAILED" and exc.details.get("status_code") == 503:
        return 503
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _user_message(request: Request, exc: HousingException) -> str:
    if exc.error_code == "PERMISSION_DENIED":
        header = get_settings().user_id_header_name
        return _FORBIDDEN_MESSAGE if request.headers.get(header) else _SIGNED_OUT_MESSAGE
    return _USER_MESSAGES.get(exc.error_code, exc.message)


def _housing_exception_handler(
    request: Request, exc: HousingException
) -> JSONResponse:
    """Return JSON from HousingException.to_dict() with appropriate status code."""
    status = _status_for(exc)
    content = exc.to_dict()
    message = _user_message(request, exc)
    if message != exc.message:
        content["message"] = message
        content["details"] = {**exc.details, "reason": exc.message}
    if status >= 500:
        logger.warning("%s on %s %s: %s", exc.error_code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=content)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: HousingException (and
    subclasses, store errors included), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(HousingException, _housing_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
