"""Error Handlers — global exception handlers for the TechAlpha Hub API.

Invariants:
    - TechAlphaError → structured JSON with error code, message, severity
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (TechAlphaError), validation (Pydantic), catch-all (Exception)
    - "All fields are required" kept as the message when only presence checks failed,
      matching what the site's forms already display
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.errors import (
    GENERIC_SERVER_MESSAGE, ErrorSeverity, MissingFieldsError, TechAlphaError,
)

logger = logging.getLogger(__name__)

# Pydantic error types that mean "the field was not really provided"
_PRESENCE_ERROR_TYPES = frozenset({"missing", "blank_field"})

# Type errors that only count as "not provided" when the input was null
_NULLABLE_TYPE_ERRORS = frozenset({"string_type", "decimal_type"})


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register TechAlpha domain/infrastructure error handler."""

    @app.exception_handler(TechAlphaError)
    async def techalpha_error_handler(request: Request, exc: TechAlphaError):
        """Handle all TechAlpha domain/infrastructure errors."""
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"TechAlphaError {exc.code}: {exc.context.debug_info or exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "submission_type": exc.context.submission_type,
                "tx_ref": exc.context.tx_ref,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc.errors()),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": GENERIC_SERVER_MESSAGE,
                "code": "INTERNAL_ERROR",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        )


def build_validation_error_response(errors: list[dict]) -> dict:
    """Build structured validation error response.

    Uses the MissingFieldsError code/message when every failure is a
    presence failure (absent, null, or blank); a malformed email, a
    wrongly typed value or a non-positive amount gets the generic
    validation envelope instead.
    """
    details = [
        {
            "field": _field_name(e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]
    if errors and all(_is_presence_error(e) for e in errors):
        envelope = MissingFieldsError([d["field"] for d in details]).to_response()
        envelope.pop("context", None)
        envelope["details"] = details
        return envelope
    return {
        "error": "Invalid request data",
        "code": "VALIDATION_ERROR",
        "category": "validation",
        "severity": ErrorSeverity.ERROR.value,
        "details": details,
    }


def _is_presence_error(error: dict) -> bool:
    """Absent, blank, or explicitly null; a value of the wrong type is not."""
    if error["type"] in _PRESENCE_ERROR_TYPES:
        return True
    return error["type"] in _NULLABLE_TYPE_ERRORS and error.get("input") is None


def _field_name(loc: tuple | list) -> str:
    """Drop the leading "body" segment FastAPI adds to request-body locations."""
    parts = [str(p) for p in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or "body"
