"""
Domain errors and their HTTP mapping.

Services raise the exceptions defined here; `setup_exception_handlers` turns them into
JSON responses of the shape `{"detail": "<readable message>"}`. Anything else that
escapes a handler is logged with an error id and returned as a 500.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError

GENERIC_ERROR_MESSAGE = "Something went wrong while processing your request."
DATABASE_ERROR_MESSAGE = "Database error. Please make sure the schema has been created."


class StoreError(Exception):
    """Base class for errors raised by storefront services."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StoreError):
    status_code = 404


class ValidationError(StoreError):
    status_code = 422


class ConflictError(StoreError):
    status_code = 409


class AuthError(StoreError):
    status_code = 401


class PermissionDeniedError(StoreError):
    status_code = 403


class UploadError(StoreError):
    """The image CDN rejected an upload or is not configured."""

    status_code = 502


# PUBLIC_INTERFACE
def describe_error(err: Any) -> str:
    """
    Turn an exception or error payload into a message fit for display.

    Accepts strings, exceptions and dict-like payloads from remote services
    (`message`, `details`, `error_description`, nested `error.message`). Never
    returns an empty object representation.
    """
    if err is None:
        return GENERIC_ERROR_MESSAGE
    if isinstance(err, str):
        return err or GENERIC_ERROR_MESSAGE
    if isinstance(err, StoreError):
        return err.message
    if isinstance(err, dict):
        for key in ("message", "details", "error_description"):
            value = err.get(key)
            if isinstance(value, str) and value:
                return value
        nested = err.get("error")
        if isinstance(nested, dict) and isinstance(nested.get("message"), str):
            return nested["message"]
        if isinstance(nested, str) and nested:
            return nested
        try:
            rendered = json.dumps(err, default=str)
        except (TypeError, ValueError):
            return GENERIC_ERROR_MESSAGE
        return DATABASE_ERROR_MESSAGE if rendered in ("{}", "[]") else rendered
    if isinstance(err, BaseException):
        text = str(err)
        return text if text else GENERIC_ERROR_MESSAGE
    return str(err) or GENERIC_ERROR_MESSAGE


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.info("{} {} -> {}: {}", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on {} {}: {}", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"detail": "The record conflicts with existing data (duplicate slug, code or email?)."},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures with an id the client can quote when reporting them."""
    error_id = uuid.uuid4().hex[:12]
    logger.opt(exception=exc).error(
        "Unhandled exception [{}] in {} {}: {}",
        error_id,
        request.method,
        request.url.path,
        describe_error(exc),
    )
    return JSONResponse(
        status_code=500,
        content={"detail": GENERIC_ERROR_MESSAGE, "error_id": error_id},
    )


# PUBLIC_INTERFACE
def setup_exception_handlers(app: FastAPI) -> None:
    """Register the domain error handlers on the application."""
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
