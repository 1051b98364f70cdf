# aidetect/core/__init__.py
from aidetect.core.errors import AppError
from aidetect.core.error_codes import ErrorCategory, ErrorCode
from aidetect.core.error_reasons import ErrorReason

__all__ = ["AppError", "ErrorCategory", "ErrorCode", "ErrorReason"]
