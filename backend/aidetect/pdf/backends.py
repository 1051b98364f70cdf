"""aidetect/pdf/backends.py

PDF parsing backends. Each one opens raw bytes and yields, per page, the
positioned text fragments the reconstructor works from.

Preferred strategy (configurable through settings.PDF_BACKENDS):
1) PyMuPDF (fitz) - spans with real baselines
2) pdfplumber     - words with kept blanks
3) pypdf          - text visitor, estimated widths (weak fallback)

The backend is resolved once per process; the first importable name wins.
"""

from __future__ import annotations

import importlib
import io
import logging
import math
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncIterator, Protocol, Sequence

from starlette.concurrency import run_in_threadpool

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.core.config import settings
from aidetect.pdf.types import PositionedTextFragment

logger = logging.getLogger("aidetect.pdf.backends")

_PASSWORD_MARKERS = ("password", "encrypt", "decrypt")


class DocumentHandle(Protocol):
    page_count: int

    def metadata(self) -> dict[str, str | None]: ...

    def page_fragments(self, index: int) -> list[PositionedTextFragment]: ...

    def close(self) -> None: ...


class PdfBackend(Protocol):
    name: str
    module: str

    def open(self, data: bytes) -> DocumentHandle: ...


def _invalid_pdf(exc: Exception | None = None) -> AppError:
    return AppError(
        code=ErrorCode.INVALID_PDF,
        reason=ErrorReason.PDF_INVALID,
        status_code=422,
        details={"error": str(exc)} if exc else None,
    )


def _encrypted_pdf() -> AppError:
    return AppError(
        code=ErrorCode.ENCRYPTED_PDF,
        reason=ErrorReason.PDF_ENCRYPTED,
        message="PDF is password protected. Please use an unprotected PDF.",
        status_code=422,
    )


def _looks_encrypted(exc: BaseException) -> bool:
    seen: BaseException | None = exc
    while seen is not None:
        text = f"{type(seen).__name__} {seen}".lower()
        if any(m in text for m in _PASSWORD_MARKERS):
            return True
        seen = seen.__cause__ or seen.__context__
    return False


def _clean_meta(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


# =============================================================================
# PyMuPDF
# =============================================================================


class _PyMuPDFHandle:
    def __init__(self, doc: Any):
        self._doc = doc
        self.page_count = doc.page_count

    def metadata(self) -> dict[str, str | None]:
        meta = self._doc.metadata or {}
        return {
            "title": _clean_meta(meta.get("title")),
            "author": _clean_meta(meta.get("author")),
            "subject": _clean_meta(meta.get("subject")),
            "creator": _clean_meta(meta.get("creator")),
            "producer": _clean_meta(meta.get("producer")),
            "creation_date": _clean_meta(meta.get("creationDate")),
            "modification_date": _clean_meta(meta.get("modDate")),
        }

    def page_fragments(self, index: int) -> list[PositionedTextFragment]:
        page = self._doc.load_page(index)
        height = page.rect.height
        out: list[PositionedTextFragment] = []
        for block in page.get_text("dict").get("blocks", []):
            if block.get("type") != 0:  # image block
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    x0, _, x1, _ = span["bbox"]
                    ox, oy = span["origin"]
                    out.append(
                        PositionedTextFragment(
                            text=span.get("text", ""),
                            x=float(ox),
                            y=float(height - oy),
                            width=float(x1 - x0),
                        )
                    )
        return out

    def close(self) -> None:
        self._doc.close()


class PyMuPDFBackend:
    name = "pymupdf"
    module = "fitz"

    def open(self, data: bytes) -> DocumentHandle:
        import fitz  # type: ignore

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            if _looks_encrypted(e):
                raise _encrypted_pdf() from e
            raise _invalid_pdf(e) from e

        if doc.needs_pass:
            doc.close()
            raise _encrypted_pdf()
        if doc.page_count == 0:
            doc.close()
            raise _invalid_pdf()
        return _PyMuPDFHandle(doc)


# =============================================================================
# pdfplumber
# =============================================================================


class _PdfPlumberHandle:
    def __init__(self, pdf: Any):
        self._pdf = pdf
        self.page_count = len(pdf.pages)

    def metadata(self) -> dict[str, str | None]:
        meta = self._pdf.metadata or {}
        return {
            "title": _clean_meta(meta.get("Title")),
            "author": _clean_meta(meta.get("Author")),
            "subject": _clean_meta(meta.get("Subject")),
            "creator": _clean_meta(meta.get("Creator")),
            "producer": _clean_meta(meta.get("Producer")),
            "creation_date": _clean_meta(meta.get("CreationDate")),
            "modification_date": _clean_meta(meta.get("ModDate")),
        }

    def page_fragments(self, index: int) -> list[PositionedTextFragment]:
        page = self._pdf.pages[index]
        height = page.height
        words = page.extract_words(keep_blank_chars=True, use_text_flow=True) or []
        return [
            PositionedTextFragment(
                text=w.get("text", ""),
                x=float(w["x0"]),
                y=float(height - w["bottom"]),
                width=float(w["x1"] - w["x0"]),
            )
            for w in words
        ]

    def close(self) -> None:
        self._pdf.close()


class PdfPlumberBackend:
    name = "pdfplumber"
    module = "pdfplumber"

    def open(self, data: bytes) -> DocumentHandle:
        import pdfplumber  # type: ignore

        try:
            pdf = pdfplumber.open(io.BytesIO(data))
            page_count = len(pdf.pages)
        except Exception as e:
            if _looks_encrypted(e):
                raise _encrypted_pdf() from e
            raise _invalid_pdf(e) from e

        if page_count == 0:
            pdf.close()
            raise _invalid_pdf()
        return _PdfPlumberHandle(pdf)


# =============================================================================
# pypdf (weak fallback)
# =============================================================================


class _PyPdfHandle:
    def __init__(self, reader: Any, stream: io.BytesIO):
        self._reader = reader
        self._stream = stream
        self.page_count = len(reader.pages)

    def metadata(self) -> dict[str, str | None]:
        meta = self._reader.metadata or {}
        return {
            "title": _clean_meta(meta.get("/Title")),
            "author": _clean_meta(meta.get("/Author")),
            "subject": _clean_meta(meta.get("/Subject")),
            "creator": _clean_meta(meta.get("/Creator")),
            "producer": _clean_meta(meta.get("/Producer")),
            "creation_date": _clean_meta(meta.get("/CreationDate")),
            "modification_date": _clean_meta(meta.get("/ModDate")),
        }

    def page_fragments(self, index: int) -> list[PositionedTextFragment]:
        page = self._reader.pages[index]
        out: list[PositionedTextFragment] = []

        def visitor(text, cm, tm, font_dict, font_size):
            if not text or not text.strip():
                return
            # text space -> user space
            x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
            y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
            scale = math.hypot(tm[0], tm[1]) * math.hypot(cm[0], cm[1]) or 1.0
            # no glyph widths here; half an em per character is close enough
            width = len(text) * float(font_size or 0) * scale * 0.5
            out.append(PositionedTextFragment(text=text, x=float(x), y=float(y), width=width))

        page.extract_text(visitor_text=visitor)
        return out

    def close(self) -> None:
        self._stream.close()


class PyPdfBackend:
    name = "pypdf"
    module = "pypdf"

    def open(self, data: bytes) -> DocumentHandle:
        from pypdf import PdfReader  # type: ignore
        from pypdf.errors import EmptyFileError, FileNotDecryptedError, PdfReadError  # type: ignore

        try:
            stream = io.BytesIO(data)
            reader = PdfReader(stream)
            if reader.is_encrypted and not reader.decrypt(""):
                raise _encrypted_pdf()
            page_count = len(reader.pages)
        except AppError:
            raise
        except FileNotDecryptedError as e:
            raise _encrypted_pdf() from e
        except (EmptyFileError, PdfReadError) as e:
            raise _invalid_pdf(e) from e
        except Exception as e:
            if _looks_encrypted(e):
                raise _encrypted_pdf() from e
            raise _invalid_pdf(e) from e

        if page_count == 0:
            raise _invalid_pdf()
        return _PyPdfHandle(reader, stream)


BACKENDS: dict[str, type] = {
    PyMuPDFBackend.name: PyMuPDFBackend,
    PdfPlumberBackend.name: PdfPlumberBackend,
    PyPdfBackend.name: PyPdfBackend,
}


@lru_cache(maxsize=None)
def _resolve(names: tuple[str, ...]) -> PdfBackend:
    for name in names:
        cls = BACKENDS.get(name)
        if cls is None:
            logger.warning("pdf.backend_unknown", extra={"backend": name})
            continue
        try:
            importlib.import_module(cls.module)
        except ImportError:
            logger.info("pdf.backend_unavailable", extra={"backend": name})
            continue
        logger.info("pdf.backend_selected", extra={"backend": name})
        return cls()

    raise AppError(
        code=ErrorCode.CONFIG_ERROR,
        reason=ErrorReason.MISSING_DEPENDENCY,
        message="No PDF extraction backend available. Install PyMuPDF (fitz), pdfplumber or pypdf.",
        status_code=500,
    )


def resolve_backend(names: Sequence[str] | None = None) -> PdfBackend:
    return _resolve(tuple(names if names is not None else settings.pdf_backend_names))


@asynccontextmanager
async def open_document(backend: PdfBackend, data: bytes) -> AsyncIterator[DocumentHandle]:
    """Open a document off the event loop and always release it, including on early failure."""
    handle = await run_in_threadpool(backend.open, data)
    try:
        yield handle
    finally:
        try:
            await run_in_threadpool(handle.close)
        except Exception:
            logger.warning("pdf.close_failed", extra={"backend": backend.name}, exc_info=True)
