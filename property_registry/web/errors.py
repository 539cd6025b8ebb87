"""Exception handlers converting uncaught failures into ``ApiResponse`` envelopes."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from property_registry.config import get_settings
from property_registry.db.unit_of_work import TRANSIENT_ERRORS
from property_registry.exceptions import TransientStoreError
from property_registry.schemas.common import ApiResponse

logger = logging.getLogger(__name__)


def envelope(
    message: str, status_code: int, errors: list[str] | None = None
) -> JSONResponse:
    body = ApiResponse[None].error_response(message, status_code, errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


def _format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [_format_validation_error(error) for error in exc.errors()]
    logger.info("Validation failed on %s: %s", request.url.path, errors)
    return envelope("Validation failed", 400, errors)


async def integrity_exception_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    logger.warning("Integrity conflict on %s: %s", request.url.path, exc.orig)
    errors = [str(exc.orig)] if get_settings().show_error_details else None
    return envelope("The request conflicts with existing data", 409, errors)


async def transient_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Transient store failure on %s: %s", request.url.path, exc)
    return envelope(
        "The database is temporarily unavailable; the request can be retried",
        500,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s", request.url.path)
    errors = [f"{type(exc).__name__}: {exc}"] if get_settings().show_error_details else None
    return envelope("An unexpected error occurred", 500, errors)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(TransientStoreError, transient_exception_handler)
    # Raw driver failures raised outside a unit-of-work scope.
    for error_type in TRANSIENT_ERRORS:
        app.add_exception_handler(error_type, transient_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
