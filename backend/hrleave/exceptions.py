from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppError):
    """A leave type, request, holiday or employee does not exist in the tenant."""

    status_code = status.HTTP_404_NOT_FOUND


class InUseError(AppError):
    """Deletion blocked because other rows still reference the entity."""

    status_code = status.HTTP_409_CONFLICT


class InsufficientBalanceError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTransitionError(AppError):
    """The request is no longer Pending."""

    status_code = status.HTTP_409_CONFLICT


class ConcurrentModificationError(AppError):
    """The optimistic ``status = 'Pending'`` guard matched zero rows."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class TenantContextMissingError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Tenant context not found.", status_code: int | None = None) -> None:
        super().__init__(message, status_code)


class ValidationError(AppError):
    """Field-level validation failure raised by the service layer."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class BalanceLedgerError(AppError):
    """A balance row is still missing after re-initialization."""


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
