# aidetect/core/error_codes.py
from enum import Enum

class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"

    # Input
    INVALID_INPUT = "INVALID_INPUT"
    TEXT_TOO_SHORT = "TEXT_TOO_SHORT"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"

    # Upload / PDF
    FILE_MISSING = "FILE_MISSING"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_PDF = "INVALID_PDF"
    ENCRYPTED_PDF = "ENCRYPTED_PDF"
    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    INVALID_SELECTION = "INVALID_SELECTION"

    # Remote detection
    NETWORK_ERROR = "NETWORK_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    FORBIDDEN = "FORBIDDEN"
    SUBMIT_REJECTED = "SUBMIT_REJECTED"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    POLL_TIMEOUT = "POLL_TIMEOUT"
    REMOTE_ANALYSIS_ERROR = "REMOTE_ANALYSIS_ERROR"


class ErrorCategory(str, Enum):
    INPUT = "INPUT"          # fix your input
    TRANSIENT = "TRANSIENT"  # try again later
    SERVICE = "SERVICE"      # remote service reported a problem
    INTERNAL = "INTERNAL"


_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.INVALID_INPUT: ErrorCategory.INPUT,
    ErrorCode.TEXT_TOO_SHORT: ErrorCategory.INPUT,
    ErrorCode.TEXT_TOO_LONG: ErrorCategory.INPUT,
    ErrorCode.FILE_MISSING: ErrorCategory.INPUT,
    ErrorCode.INVALID_FILE_TYPE: ErrorCategory.INPUT,
    ErrorCode.FILE_TOO_LARGE: ErrorCategory.INPUT,
    ErrorCode.INVALID_PDF: ErrorCategory.INPUT,
    ErrorCode.ENCRYPTED_PDF: ErrorCategory.INPUT,
    ErrorCode.EMPTY_DOCUMENT: ErrorCategory.INPUT,
    ErrorCode.INVALID_SELECTION: ErrorCategory.INPUT,
    ErrorCode.NETWORK_ERROR: ErrorCategory.TRANSIENT,
    ErrorCode.RATE_LIMITED: ErrorCategory.TRANSIENT,
    ErrorCode.POLL_TIMEOUT: ErrorCategory.TRANSIENT,
    ErrorCode.FORBIDDEN: ErrorCategory.SERVICE,
    ErrorCode.SUBMIT_REJECTED: ErrorCategory.SERVICE,
    ErrorCode.TASK_NOT_FOUND: ErrorCategory.SERVICE,
    ErrorCode.REMOTE_ANALYSIS_ERROR: ErrorCategory.SERVICE,
}


def category_for(code: ErrorCode) -> ErrorCategory:
    return _CATEGORIES.get(code, ErrorCategory.INTERNAL)
