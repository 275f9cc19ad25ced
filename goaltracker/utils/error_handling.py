"""
Exception handlers that turn errors into ``{"success": false, "error": ...}`` responses.
"""
from typing import Dict, Type
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from goaltracker.exceptions import (
    GoalTrackerException,
    UnauthenticatedError,
    InvalidCredentialsError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ValidationFailedError,
)
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Server error"

STATUS_CODES: Dict[Type[GoalTrackerException], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    InvalidCredentialsError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    ValidationFailedError: status.HTTP_400_BAD_REQUEST,
}


def error_response(status_code: int, message: str, headers: Dict[str, str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def status_code_for(exc: GoalTrackerException) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


async def goal_tracker_exception_handler(request: Request, exc: GoalTrackerException):
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Unhandled service error on {request.method} {request.url.path}: {exc}")
        return error_response(status_code, GENERIC_ERROR_MESSAGE)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(status_code, exc.message, headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI):
    """Attach the error envelope handlers to ``app``."""
    app.add_exception_handler(GoalTrackerException, goal_tracker_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
