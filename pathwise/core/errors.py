"""
Exception handlers that turn every failure into the JSON error envelope:

    {"success": false, "message": "...", "errors": [...]}
"""
import logging
import traceback
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pathwise.core import config

logger = logging.getLogger(__name__)


def error_body(message: str, **extra) -> dict:
    body = {"success": False, "message": message}
    body.update(extra)
    return body


def _format_validation_error(error: dict) -> str:
    # ("body", "email") -> "email"; drop the request location prefix
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    msg = error.get("msg", "Invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        extra = dict(detail)
        message = extra.pop("message", "Request failed")
        body = error_body(message, **extra)
    else:
        body = error_body(str(detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(err) for err in exc.errors()]
    logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors=errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    extra = {}
    if config.ENVIRONMENT != "production":
        extra["error"] = str(exc)
        extra["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", **extra),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
