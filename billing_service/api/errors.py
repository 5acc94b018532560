"""Translate billing errors into JSON responses"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from billing_service.api.dependencies import get_request_id
from billing_service.domain.exceptions import (
    BillingError,
    ServerError,
    UnprocessableContentError,
    ValidationError,
)

logger = logging.getLogger("billing_service.api")


def error_response(error: BillingError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _describe(error: dict) -> str:
    """Human-readable detail for the first pydantic error, e.g. 'principal_amount: ...'"""
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    field = ".".join(location)
    message = error.get("msg", "invalid value")
    return f"{field}: {message}" if field else message


async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
    logger.warning(
        f"Request failed: {exc.message}",
        extra={"request_id": get_request_id(request), "error_code": exc.kind.value},
    )
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return error_response(UnprocessableContentError())
    detail = _describe(errors[0]) if errors else None
    return error_response(ValidationError(detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Full detail stays in the logs; clients only get the generic envelope
    logger.error(f"Unexpected error: {exc}", exc_info=exc, extra={"request_id": get_request_id(request)})
    return error_response(ServerError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BillingError, billing_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
