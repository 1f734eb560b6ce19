from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from weekly_goals_api.common.error_handlers import ServiceError, handle_service_error
from weekly_goals_api.models import ErrorResponse


def _field_errors(errors) -> list[dict]:
    return [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions, passing standardized error bodies through"""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = ErrorResponse.create(
            code="HTTP_ERROR", message=str(exc.detail)
        ).model_dump()
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse.create(
            code="VALIDATION_ERROR",
            message="Request validation failed",
            details={"validation_errors": _field_errors(exc.errors())},
        ).model_dump(),
    )


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle service-layer exceptions"""
    http_exc = handle_service_error(exc)
    return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse.create(
            code="INTERNAL_ERROR", message="Internal server error"
        ).model_dump(),
    )
