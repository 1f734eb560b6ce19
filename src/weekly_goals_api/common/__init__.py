"""
Common utilities module
"""

from weekly_goals_api.common.error_handlers import (
    ServiceError,
    ResourceNotFoundError,
    ValidationError,
    DuplicateWeekError,
    StorageError,
    AuthorizationError,
    error_status_code,
    handle_service_error,
    safe_execute,
    require_text,
)

__all__ = [
    "ServiceError",
    "ResourceNotFoundError",
    "ValidationError",
    "DuplicateWeekError",
    "StorageError",
    "AuthorizationError",
    "error_status_code",
    "handle_service_error",
    "safe_execute",
    "require_text",
]
