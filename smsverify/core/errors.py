"""
smsverify/core/errors.py

Purpose: Maps exceptions to the JSON error envelope

Every error response has the shape {"error", "code", "details"}:

- NOT_FOUND (404): unknown contact id
- VALIDATION_ERROR (422): unusable phone number, duplicate contact id,
  or a request body that fails schema validation
- MESSAGE_TOO_LONG (422): text over one SMS without allow_multiple,
  or a confirmation template that renders too long;
  details carry {"length", "limit"}
- HTTP_ERROR: routing errors raised by Starlette (404, 405)
- INTERNAL_ERROR (500): anything unexpected; the message is hidden in production

Gateway failures are not errors here: the controller reports them in
its return value and the endpoints answer 200.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from smsverify.core.config import settings
from smsverify.core.exceptions import SmsVerifyError
from smsverify.core.logging import get_logger
from smsverify.schemas.response import ErrorResponse

logger = get_logger(__name__)


def _error_response(status_code: int, error: str, code: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, code=code, details=details).model_dump()
    )


def add_exception_handlers(app: FastAPI):
    """
    Registers the error envelope handlers with the FastAPI app.
    """
    @app.exception_handler(SmsVerifyError)
    async def smsverify_exception_handler(request: Request, exc: SmsVerifyError):
        """
        Domain errors carry their own code and status
        (NOT_FOUND, VALIDATION_ERROR, MESSAGE_TOO_LONG).
        """
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Unknown routes and wrong methods; HTTPExceptions raised by FastAPI itself.
        """
        return _error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Request bodies that fail the pydantic schemas. Same code as the
        service's own ValidationError so clients handle one case.
        """
        return _error_response(
            422,
            "Input validation failed",
            "VALIDATION_ERROR",
            jsonable_encoder(exc.errors())
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return _error_response(500, message, "INTERNAL_ERROR")
