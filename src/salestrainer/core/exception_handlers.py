"""Global exception handlers for FastAPI."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from salestrainer.core.errors import AppError, ValidationError
from salestrainer.core.logging import get_logger

logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Handle all AppError exceptions and convert to JSON response.

    Returns standardized error format:
    {
        "code": "NOT_FOUND",
        "message": "TrainingSession with ID xyz not found",
        "details": {"resource": "TrainingSession", "resource_id": "xyz"}
    }
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "app_error",
        code=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
        message=exc.message,
    )
    error_response = exc.to_response()
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render body/query validation failures in the AppError shape."""
    error = ValidationError(
        "Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return await app_error_handler(request, error)


def register_exception_handlers(app) -> None:
    """Register all custom exception handlers with FastAPI app."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
