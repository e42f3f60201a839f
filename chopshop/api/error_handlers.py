"""Error Handlers — global exception handlers mapping failures to responses.

Invariants:
    - ChopshopError → status from status_for(), structured JSON body
    - RequestValidationError → field-level error details (400)
    - Exception (catch-all) → never leaks internal details
    - Messages are replaced by the default error text unless the caller holds
      the see-errors right
    - InvalidSessionTokenError also clears the session cookies
    - Status >= 500 is logged with the caller's identity (session, user, path)

Design Decisions:
    - Three-layer handler: domain (ChopshopError), validation (Pydantic), catch-all
    - Extracted from main.py so tests can build a bare app with the same mapping
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError

from chopshop.api.context import context_of, destroy_session_cookies
from chopshop.api.responses import WireJSONResponse
from chopshop.config import get_settings
from chopshop.core.errors import (
    ChopshopError, ErrorSeverity, InvalidSessionTokenError, status_for,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_chopshop_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_chopshop_error_handler(app: FastAPI) -> None:
    """Register codec/session error handler."""

    @app.exception_handler(ChopshopError)
    async def chopshop_error_handler(request: Request, exc: ChopshopError):
        status_code = status_for(exc)
        _log_error(request, exc, status_code)
        response = WireJSONResponse(
            status_code=status_code,
            content=exc.to_response(_visible_message(request, exc)),
        )
        if isinstance(exc, InvalidSessionTokenError):
            destroy_session_cookies(response, get_settings())
        return response


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {len(exc.errors())} error(s)",
            extra={"path": request.url.path, "error_code": "VALIDATION_ERROR"},
        )
        return WireJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        status_code = status_for(exc)
        _log_error(request, exc, status_code)
        return WireJSONResponse(
            status_code=status_code,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": _visible_message(request, exc),
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _visible_message(request: Request, exc: BaseException) -> str:
    friendly = get_settings().default_error_text
    ctx = context_of(request)
    if ctx is None:
        return friendly
    return ctx.custom_error_message(exc, friendly)


def _log_error(request: Request, exc: BaseException, status_code: int) -> None:
    ctx = context_of(request)
    extra = ctx.log_extra() if ctx else {"path": request.url.path}
    extra["status_code"] = status_code
    extra["error_code"] = getattr(exc, "code", "INTERNAL_ERROR")
    if status_code >= 500:
        logger.error(f"Server error: {exc}", extra=extra, exc_info=exc)
    else:
        logger.info(f"Client error: {exc}", extra=extra)


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
