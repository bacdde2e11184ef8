import logging
import traceback
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    message = "Something went wrong on the server."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationFailed(AppError):
    status_code = 400
    message = "Validation failed."

    def __init__(self, errors: List[dict], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors


class Unauthenticated(AppError):
    status_code = 401
    message = "Not authorized"


class Forbidden(AppError):
    status_code = 403
    message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class Conflict(AppError):
    status_code = 409
    message = "Conflict"


class Internal(AppError):
    status_code = 500


def _field_name(loc) -> str:
    # drop the leading "body"/"query"/"path" marker
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts) or "body"


def validation_errors(exc: RequestValidationError) -> List[dict]:
    out = []
    for err in exc.errors():
        msg = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        out.append({"field": _field_name(err.get("loc", ())), "message": msg})
    return out


async def app_error_handler(request: Request, exc: AppError):
    body = {"message": exc.message}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, Internal):
        logger.error("Internal error on %s %s: %s",
                     request.method, request.url.path, exc.message)
        body["message"] = Internal.message
        if settings.debug:
            body["stack"] = traceback.format_exception(exc)
    return JSONResponse(status_code=exc.status_code, content=body,
                        headers=headers)


async def request_validation_handler(request: Request,
                                     exc: RequestValidationError):
    return await app_error_handler(
        request, ValidationFailed(validation_errors(exc)))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s",
                     request.method, request.url.path)
    body = {"message": Internal.message}
    if settings.debug:
        body["stack"] = traceback.format_exception(exc)
    return JSONResponse(status_code=500, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError,
                              request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
