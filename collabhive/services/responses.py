"""
Tagged result type returned by every service operation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ServiceResponseType(str, Enum):
    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INTERNAL_SERVER_ERROR = "internal_server_error"


@dataclass(frozen=True)
class ServiceResponse(Generic[T]):
    """Either ``SUCCESS`` with ``data`` or an error tag with a ``message``.

    ``code`` optionally narrows an error tag for callers that need to tell
    failures apart (e.g. ``previously_declined`` vs ``duplicate_request``,
    both of which are BAD_REQUEST).
    """

    type: ServiceResponseType
    data: T | None = None
    message: str | None = None
    code: str | None = None

    @property
    def ok(self) -> bool:
        return self.type == ServiceResponseType.SUCCESS

    @classmethod
    def success(cls, data: T = None) -> "ServiceResponse[T]":
        return cls(type=ServiceResponseType.SUCCESS, data=data)

    @classmethod
    def bad_request(cls, message: str, code: str | None = None) -> "ServiceResponse[T]":
        return cls(type=ServiceResponseType.BAD_REQUEST, message=message, code=code)

    @classmethod
    def forbidden(cls, message: str) -> "ServiceResponse[T]":
        return cls(type=ServiceResponseType.FORBIDDEN, message=message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResponse[T]":
        return cls(type=ServiceResponseType.NOT_FOUND, message=message)

    @classmethod
    def internal_error(
        cls, message: str = "Internal server error"
    ) -> "ServiceResponse[T]":
        return cls(type=ServiceResponseType.INTERNAL_SERVER_ERROR, message=message)
