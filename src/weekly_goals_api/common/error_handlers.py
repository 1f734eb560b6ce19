"""
Common error handling utilities
"""

import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from weekly_goals_api.models import ErrorResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base exception for service-layer errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ResourceNotFoundError(ServiceError):
    """Raised when a requested resource is not found"""

    def __init__(self, resource_type: str, resource_id: str | int):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type} with ID {resource_id} not found"
        super().__init__(message, "RESOURCE_NOT_FOUND")


class ValidationError(ServiceError):
    """Raised when validation fails"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, "VALIDATION_ERROR")


class DuplicateWeekError(ServiceError):
    """Raised when creating a week whose id already exists"""

    def __init__(self, week_id: str):
        self.week_id = week_id
        super().__init__(f"Week {week_id} already exists", "DUPLICATE_WEEK")


class StorageError(ServiceError):
    """Raised when the database fails during a write"""

    def __init__(self, message: str):
        super().__init__(message, "STORAGE_ERROR")


class AuthorizationError(ServiceError):
    """Raised when the caller is not allowed to use the API"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "AUTHORIZATION_ERROR")


def error_status_code(error: ServiceError) -> int:
    """HTTP status code for a service error"""
    if isinstance(error, ResourceNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, DuplicateWeekError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, AuthorizationError):
        return status.HTTP_401_UNAUTHORIZED
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_service_error(error: Exception) -> HTTPException:
    """Convert service errors to HTTP exceptions with standardized format"""
    if isinstance(error, ServiceError) and not isinstance(error, StorageError):
        details: dict = {}
        if isinstance(error, ValidationError) and error.field:
            details["field"] = error.field
        elif isinstance(error, DuplicateWeekError):
            details["week_id"] = error.week_id
        return HTTPException(
            status_code=error_status_code(error),
            detail=ErrorResponse.create(
                code=error.error_code or "SERVICE_ERROR",
                message=error.message,
                details=details,
            ).model_dump(),
        )

    logger.error(f"Unhandled service error: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=ErrorResponse.create(
            code=getattr(error, "error_code", None) or "INTERNAL_SERVER_ERROR",
            message="Internal server error",
            details={"error_type": type(error).__name__},
        ).model_dump(),
    )


def safe_execute(session: Session, operation, rollback_on_error: bool = True):
    """Run a unit of work and commit it, rolling back on any failure"""
    try:
        result = operation()
        session.commit()
        return result
    except ServiceError:
        if rollback_on_error:
            session.rollback()
        raise
    except Exception as e:
        if rollback_on_error:
            session.rollback()
        logger.error(f"Database operation failed: {e}")
        raise StorageError(f"Database operation failed: {e}") from e


def require_text(value: str | None, field: str) -> str:
    """Reject missing or blank required text input"""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field)
    return value
