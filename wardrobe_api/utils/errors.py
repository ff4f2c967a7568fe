#!/usr/bin/env python3
"""
Standardized error handling

Service code raises ServiceError subclasses, one per ErrorKind. Routes turn them
into HTTPException via to_http_exception. Anything that is not a ServiceError is
treated as an internal failure and surfaced without upstream detail.
"""

from enum import Enum
from typing import Any

from fastapi import HTTPException, status
from loguru import logger
from pydantic import BaseModel


class ErrorKind(Enum):
    """Closed set of error kinds surfaced to callers"""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    RESOURCE_EXHAUSTED = "RESOURCE_EXHAUSTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ErrorCode(Enum):
    """Error codes placed in response bodies"""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StandardErrorResponse(BaseModel):
    """Standard error response body"""

    success: bool = False
    error_code: str
    message: str
    details: dict[str, Any] | None = None

    # Quota information
    quota_info: dict[str, Any] | None = None

    # Suggested next steps
    suggested_actions: list[str] | None = None


class ServiceError(Exception):
    """Base class for errors raised by the quota and generation services"""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidArgumentError(ServiceError):
    kind = ErrorKind.INVALID_ARGUMENT


class QuotaExhaustedError(ServiceError):
    """A named quota counter is depleted"""

    kind = ErrorKind.RESOURCE_EXHAUSTED

    def __init__(self, counter: str, message: str | None = None):
        super().__init__(message or f"No remaining quota for {counter}", counter=counter)
        self.counter = counter


class PermissionDeniedError(ServiceError):
    kind = ErrorKind.PERMISSION_DENIED


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL


class ProfileNotFoundError(NotFoundError):
    """The subscription provider has no profile for the id"""

    def __init__(self, profile_id: str):
        super().__init__(f"Subscription profile not found: {profile_id}", profile_id=profile_id)
        self.profile_id = profile_id


class SubscriptionProviderError(InternalError):
    """Transport, authorization or response-shape failure talking to Adapty"""


class QuotaStoreError(InternalError):
    """Quota record store I/O failure"""


class GenerationError(InternalError):
    """Content generation failed or returned unusable output"""


_KIND_STATUS = {
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RESOURCE_EXHAUSTED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class QuotaError:
    """Quota related error helpers"""

    @staticmethod
    def quota_exceeded(counter: str) -> HTTPException:
        """Named counter has no remaining uses"""
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=StandardErrorResponse(
                error_code=ErrorCode.QUOTA_EXCEEDED.value,
                message=f"No remaining {counter}",
                quota_info={"counter": counter, "remaining": 0},
                suggested_actions=["Upgrade your subscription for more uses", "Restore purchases and sync again"],
            ).model_dump(),
        )


class RequestError:
    """Request related error helpers"""

    @staticmethod
    def invalid_argument(message: str, details: dict[str, Any] | None = None) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=StandardErrorResponse(
                error_code=ErrorCode.INVALID_ARGUMENT.value,
                message=message,
                details=details,
            ).model_dump(),
        )

    @staticmethod
    def permission_denied(message: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=StandardErrorResponse(
                error_code=ErrorCode.PERMISSION_DENIED.value,
                message=message,
                suggested_actions=["Make sure the app is signed in to its subscription account"],
            ).model_dump(),
        )

    @staticmethod
    def not_found(message: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=StandardErrorResponse(
                error_code=ErrorCode.DATA_NOT_FOUND.value,
                message=message,
            ).model_dump(),
        )


class SystemError:
    """System error helpers"""

    @staticmethod
    def internal_error(error_id: str | None = None) -> HTTPException:
        """Internal failure, upstream detail is never included"""
        return HTTPException(
            status_code=_KIND_STATUS[ErrorKind.INTERNAL],
            detail=StandardErrorResponse(
                error_code=ErrorCode.INTERNAL_ERROR.value,
                message="Internal server error",
                details={"error_id": error_id} if error_id else None,
                suggested_actions=["Try again later"],
            ).model_dump(),
        )


def to_http_exception(error: ServiceError) -> HTTPException:
    """Map a ServiceError onto the HTTP error contract"""
    if error.kind is ErrorKind.RESOURCE_EXHAUSTED:
        return QuotaError.quota_exceeded(error.details.get("counter", "quota"))
    if error.kind is ErrorKind.PERMISSION_DENIED:
        return RequestError.permission_denied(error.message)
    if error.kind is ErrorKind.NOT_FOUND:
        return RequestError.not_found(error.message)
    if error.kind is ErrorKind.INVALID_ARGUMENT:
        return RequestError.invalid_argument(error.message, error.details or None)
    return SystemError.internal_error()


def http_error_for(error: Exception, action: str) -> HTTPException:
    """HTTP error for a failed route action

    Internal failures are logged with their cause and surfaced generically.
    """
    if isinstance(error, ServiceError) and error.kind is not ErrorKind.INTERNAL:
        return to_http_exception(error)
    if isinstance(error, ServiceError):
        logger.error(f"{action} failed: {error.message} {error.details or ''}")
    else:
        logger.exception(f"{action} failed: {type(error).__name__}: {error}")
    return SystemError.internal_error()
