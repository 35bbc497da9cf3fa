"""
Standardized response helpers for consistent API responses.
"""

from typing import Any, TypeVar
from fastapi import HTTPException, status
from pydantic import BaseModel

from collabhive.services.responses import ServiceResponse, ServiceResponseType

T = TypeVar("T")


class APIResponse(BaseModel):
    """Standard API response model"""

    success: bool
    message: str
    data: Any | None = None
    errors: list[str] | None = None


STATUS_CODES: dict[ServiceResponseType, int] = {
    ServiceResponseType.SUCCESS: status.HTTP_200_OK,
    ServiceResponseType.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ServiceResponseType.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ServiceResponseType.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ServiceResponseType.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ServiceResponseType.INTERNAL_SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def success_response(
    message: str = "Success",
    data: Any = None,
) -> APIResponse:
    """Create a successful response"""
    return APIResponse(success=True, message=message, data=data)


def error_response(
    message: str = "An error occurred",
    errors: list[str] | None = None,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> HTTPException:
    """Create an error response"""
    response_data = APIResponse(success=False, message=message, errors=errors or [])

    raise HTTPException(status_code=status_code, detail=response_data.model_dump())


def forbidden_response(message: str = "Access forbidden") -> HTTPException:
    """Create a forbidden error response"""
    return error_response(message=message, status_code=status.HTTP_403_FORBIDDEN)


def unauthorized_response(message: str = "Authentication required") -> HTTPException:
    """Create an unauthorized error response"""
    return error_response(message=message, status_code=status.HTTP_401_UNAUTHORIZED)


def unwrap(result: ServiceResponse[T]) -> T:
    """Return the payload of a successful service result, raise otherwise."""
    if result.ok:
        return result.data

    if result.type == ServiceResponseType.INTERNAL_SERVER_ERROR:
        # internal messages never reach the caller
        message = "Something went wrong :("
    else:
        message = result.message or "An error occurred"

    raise error_response(
        message=message,
        errors=[result.code] if result.code else None,
        status_code=STATUS_CODES[result.type],
    )
