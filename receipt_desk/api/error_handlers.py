# receipt_desk/api/error_handlers.py
"""
Exception handlers: the only place errors become HTTP status codes.

Bodies follow ``{"message": ..., "details": ...}``; ``details`` is omitted
when there is nothing to add.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from receipt_desk.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _error_body(message: str, details=None) -> dict:
    body = {"message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body


def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and query strings are client errors, reported as 400
    logger.warning("Invalid request to %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request", exc.errors()),
    )


def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=_error_body(exc.message, exc.details),
    )


def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=HTTP_404_NOT_FOUND,
        content=_error_body(exc.message, exc.details),
    )


def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("Internal server error"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

