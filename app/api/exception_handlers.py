"""Translate errors to HTTP responses. Every error body has the shape {"message": ...}.

Unexpected errors are turned into a generic 500 with a trace id by
UnhandledErrorMiddleware, so they still pass through the security headers.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AuthError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."
VALIDATION_ERROR_MESSAGE = "Request validation failed"


async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Framework-raised errors (unknown route, wrong method) in the same body shape.
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=exc.headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={"message": VALIDATION_ERROR_MESSAGE, "errors": jsonable_encoder(errors)},
    )


def unexpected_error_response(exc: Exception) -> JSONResponse:
    trace_id = uuid.uuid4().hex
    logger.error(
        "An unhandled exception occurred. TraceId: %s",
        trace_id,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=500,
        content={"message": GENERIC_ERROR_MESSAGE, "trace_id": trace_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, handle_auth_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
