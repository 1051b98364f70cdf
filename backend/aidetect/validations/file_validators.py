"""
file_validators.py
- Purpose: Centralized validation for PDF uploads (type, extension, size, emptiness).
- Design: Raise AppError with stable error codes for UI + logs.
"""

from fastapi import UploadFile

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.core.config import settings
from aidetect.pdf.extract import PdfSource

READ_CHUNK_BYTES = 1024 * 1024
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return "0 Bytes"
    i = 0
    size = float(num_bytes)
    while size >= 1024 and i < len(_SIZE_UNITS) - 1:
        size /= 1024
        i += 1
    value = ("%.2f" % size).rstrip("0").rstrip(".")
    return f"{value} {_SIZE_UNITS[i]}"


def validate_pdf_upload(pdf: UploadFile | None) -> None:
    # Basic presence check
    if not pdf or not pdf.filename:
        raise AppError(code=ErrorCode.FILE_MISSING, reason=ErrorReason.FILE_MISSING, status_code=422)

    # Content-type and extension are both required
    content_type = (pdf.content_type or "").split(";")[0].strip().lower()
    if content_type != "application/pdf":
        raise AppError(
            code=ErrorCode.INVALID_FILE_TYPE,
            reason=ErrorReason.NOT_A_PDF,
            status_code=415,
            details={"content_type": content_type},
        )
    if not pdf.filename.lower().endswith(".pdf"):
        raise AppError(
            code=ErrorCode.INVALID_FILE_TYPE,
            reason=ErrorReason.NOT_A_PDF,
            status_code=415,
            details={"file_name": pdf.filename},
        )

    # Size is only trustworthy once read; check the declared one when present
    if pdf.size is not None:
        validate_pdf_size(pdf.size)


def validate_pdf_size(size: int) -> None:
    if size == 0:
        raise AppError(code=ErrorCode.FILE_MISSING, reason=ErrorReason.FILE_EMPTY, status_code=422)
    if size > settings.MAX_FILE_SIZE_BYTES:
        raise AppError(
            code=ErrorCode.FILE_TOO_LARGE,
            reason=ErrorReason.FILE_TOO_LARGE,
            message=f"File is too large. Maximum size is {format_file_size(settings.MAX_FILE_SIZE_BYTES)}",
            status_code=413,
            details={"size": size, "max_size": settings.MAX_FILE_SIZE_BYTES},
        )


async def read_pdf_upload(pdf: UploadFile) -> PdfSource:
    """Validate headers, then stream the body into memory while enforcing the size limit."""
    validate_pdf_upload(pdf)

    buf = bytearray()
    while True:
        chunk = await pdf.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > settings.MAX_FILE_SIZE_BYTES:
            validate_pdf_size(len(buf))

    validate_pdf_size(len(buf))
    return PdfSource(data=bytes(buf), file_name=pdf.filename, content_type="application/pdf")
