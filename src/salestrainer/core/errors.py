"""Application exceptions and the JSON error body they render to."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of every non-2xx API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base for errors the API renders as an ErrorDetail.

    Subclasses pin `code` and `status_code`; callers supply the message and
    optional structured details.
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code
        super().__init__(message)

    def to_response(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class ConfigurationError(AppError):
    """Server is missing credentials for an external service."""

    code = "CONFIGURATION_ERROR"
    status_code = 500


class ValidationError(AppError):
    """Request is well-formed but cannot be acted on."""

    code = "VALIDATION_ERROR"
    status_code = 422


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            f"{resource} with ID {resource_id} not found",
            details={"resource": resource, "resource_id": resource_id},
        )


class InvalidStateError(AppError):
    """Operation is not allowed in the resource's current lifecycle state."""

    code = "INVALID_STATE"
    status_code = 400


class TransientServiceError(AppError):
    """A generative, speech or transcription call failed or timed out.

    The caller may retry the whole operation.
    """

    code = "SERVICE_UNAVAILABLE"
    status_code = 502


class GenerationError(TransientServiceError):
    """Generated scenario content could not be parsed."""

    code = "GENERATION_ERROR"
