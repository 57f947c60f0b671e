from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from dayflow.core.logging import get_logger

logger = get_logger(__name__)


class DayflowError(Exception):
    """Base class for errors reported back to the caller as ``{"detail": ...}``."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(DayflowError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(DayflowError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(DayflowError):
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(DayflowError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(DayflowError):
    status_code = status.HTTP_403_FORBIDDEN


async def dayflow_error_handler(request: Request, exc: DayflowError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=type(exc).__name__,
        detail=exc.detail,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DayflowError, dayflow_error_handler)
