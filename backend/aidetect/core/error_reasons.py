"""
error_reasons.py
- Purpose: Human-friendly "reason" strings.
- Keep these stable; they may be surfaced in UI.
"""

from enum import Enum


class ErrorReason(str, Enum):
    UNKNOWN = "Unknown error"

    INVALID_INPUT = "Invalid input"
    TEXT_TOO_SHORT = "Text too short (minimum 10 characters)"
    TEXT_TOO_LONG = "Text too long (maximum 50,000 characters)"

    FILE_MISSING = "No file selected"
    NOT_A_PDF = "File must be a PDF"
    FILE_TOO_LARGE = "File is too large"
    FILE_EMPTY = "PDF file is empty"
    PDF_INVALID = "Invalid or corrupted PDF"
    PDF_ENCRYPTED = "PDF is password protected"
    PDF_NO_TEXT = "No extractable text in PDF"
    INVALID_SELECTION = "Invalid page selection"

    NETWORK_FAILED = "Could not reach the detection service"
    TOO_MANY_REQUESTS = "Too many requests"
    NOT_AUTHORIZED = "Not authorized"
    SUBMIT_REJECTED = "Detection service rejected the submission"
    TASK_NOT_FOUND = "Detection task not found"
    POLL_TIMEOUT = "Analysis took too long. Try again later"
    ANALYSIS_FAILED = "Detection service reported an error"

    INTERNAL_ERROR = "Internal server error"
    MISSING_DEPENDENCY = "Missing dependency"
