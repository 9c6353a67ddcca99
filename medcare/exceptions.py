"""
Application error types and the handlers that turn them into responses.

Every error body has the shape {"detail": ...}; validation failures add
an "errors" list.
"""
import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

class AppException(Exception):
    """Base class for errors raised outside the account lifecycle."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class BadRequestAlertException(AppException):
    """Raised when a request is well formed but cannot be applied."""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _log_client_error(request: Request, status_code: int, detail) -> None:
    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(level, f"{request.method} {request.url.path} -> {status_code}: {detail}")


async def app_exception_handler(request: Request, exc: AppException):
    _log_client_error(request, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def logged_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Log account and authorization errors, then answer the way FastAPI does.
    """
    _log_client_error(request, exc.status_code, exc.detail)
    return await http_exception_handler(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    _log_client_error(request, status.HTTP_422_UNPROCESSABLE_ENTITY, errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": errors}
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    """
    Constraint violations that escaped the services map to 409.

    The database message is logged but never returned.
    """
    _log_client_error(request, status.HTTP_409_CONFLICT, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "The request conflicts with existing data"}
    )


def register_exception_handlers(app):
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, logged_http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
