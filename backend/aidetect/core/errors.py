"""
errors.py
- Purpose: AppError used across extraction, detection and services for consistent errors.
- Pattern: raise AppError(...) in library/service code, handler converts to JSON response.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from fastapi import status as http_status
from aidetect.core.error_codes import ErrorCategory, ErrorCode, category_for
from aidetect.core.error_reasons import ErrorReason


@dataclass
class AppError(Exception):
    code: ErrorCode
    reason: str
    status_code: int = http_status.HTTP_400_BAD_REQUEST
    details: dict[str, Any] | None = None
    message: str | None = None  # Optional human-readable message

    def __post_init__(self) -> None:
        # str() of a str-Enum renders "ErrorReason.X"; keep the plain text
        if isinstance(self.reason, Enum):
            self.reason = self.reason.value

    def __str__(self) -> str:
        return self.message or self.reason

    @property
    def category(self) -> ErrorCategory:
        return category_for(self.code)

    @property
    def retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "category": self.category.value,
                "reason": self.reason,
                "message": self.message if self.message else self.reason,
            }
        }
        if self.details:
            payload["error"]["details"] = self.details
        return payload


# Convenience constructors (keep library code terse)
def unprocessable(reason: str, *, code: ErrorCode, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=code, reason=reason, status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY, message=message, details=details)


def upstream_error(reason: str, *, code: ErrorCode, status_code: int = http_status.HTTP_502_BAD_GATEWAY, message: str | None = None, details: dict | None = None) -> AppError:
    return AppError(code=code, reason=reason, status_code=status_code, message=message, details=details)


def internal_error(reason: str = ErrorReason.UNKNOWN, *, details: dict | None = None) -> AppError:
    return AppError(code=ErrorCode.INTERNAL_ERROR, reason=reason, status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)
