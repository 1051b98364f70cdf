"""aidetect/pdf/extract.py

Deterministic PDF -> text extraction.

Flow per document:
  reading -> parsing -> extracting (per page, 0..100%) -> cleaning -> completed

Whole-document failures (corrupt, password protected) are terminal and raised
as AppError. A page that fails to parse degrades to empty text and extraction
continues with the next page.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from starlette.concurrency import run_in_threadpool

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.core.config import settings
from aidetect.core.progress import ProgressLike, as_reporter
from aidetect.pdf.backends import DocumentHandle, PdfBackend, open_document, resolve_backend
from aidetect.pdf.reconstruct import reconstruct_page
from aidetect.pdf.types import (
    DocumentExtractionResult,
    DocumentMetadata,
    PageExtraction,
    PagePreviews,
    PositionedTextFragment,
)
from aidetect.text.sanitize import clean_extracted_text

logger = logging.getLogger("aidetect.pdf.extract")


@dataclass(frozen=True)
class PdfSource:
    data: bytes
    file_name: str = "document.pdf"
    content_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.data)


def estimate_extraction_seconds(size_bytes: int) -> int:
    """Rough UI hint: ~2.5 seconds per megabyte."""
    if size_bytes <= 0:
        return 0
    return math.ceil(size_bytes / (1024 * 1024) * 2.5)


def _invalid_selection(message: str, details: dict | None = None) -> AppError:
    return AppError(
        code=ErrorCode.INVALID_SELECTION,
        reason=ErrorReason.INVALID_SELECTION,
        message=message,
        status_code=422,
        details=details,
    )


class PdfDocumentExtractor:
    def __init__(
        self,
        backend: PdfBackend | None = None,
        *,
        preview_chars: int | None = None,
        scanned_sample_pages: int | None = None,
        scanned_min_avg_chars: int | None = None,
    ):
        self.backend = backend or resolve_backend()
        self.preview_chars = settings.PREVIEW_TEXT_CHARS if preview_chars is None else preview_chars
        self.scanned_sample_pages = (
            settings.SCANNED_SAMPLE_PAGES if scanned_sample_pages is None else scanned_sample_pages
        )
        self.scanned_min_avg_chars = (
            settings.SCANNED_MIN_AVG_CHARS if scanned_min_avg_chars is None else scanned_min_avg_chars
        )

    # ----------------------------
    # Public operations
    # ----------------------------
    async def get_info(self, source: PdfSource) -> DocumentMetadata:
        """Best-effort metadata; never raises because info display is non-critical."""
        try:
            async with open_document(self.backend, source.data) as doc:
                meta = await run_in_threadpool(doc.metadata)
                num_pages = doc.page_count
        except Exception as e:
            logger.warning("pdf.info_failed", extra={"file_name": source.file_name, "error": str(e)})
            return DocumentMetadata(num_pages=0, file_name=source.file_name, file_size=source.size)

        return DocumentMetadata(
            num_pages=num_pages,
            file_name=source.file_name,
            file_size=source.size,
            title=meta.get("title") or source.file_name,
            author=meta.get("author"),
            subject=meta.get("subject"),
            creator=meta.get("creator"),
            producer=meta.get("producer"),
            creation_date=meta.get("creation_date"),
            modification_date=meta.get("modification_date"),
        )

    async def extract(
        self,
        source: PdfSource,
        pages: Iterable[int] | None = None,
        progress: ProgressLike = None,
    ) -> DocumentExtractionResult:
        reporter = as_reporter(progress)
        reporter.emit("reading", "Reading PDF file...")

        async with open_document(self.backend, source.data) as doc:
            total = doc.page_count
            reporter.emit("parsing", f"Parsing PDF document ({total} pages)...")

            targets = self._resolve_pages(pages, total)
            raw_chars: dict[int, int] = {}
            results: list[PageExtraction] = []

            reporter.emit("extracting", f"Extracting text from {len(targets)} pages...", percent=0)
            for done, page_number in enumerate(targets, start=1):
                fragments = await self._page_fragments(doc, page_number)
                raw_chars[page_number] = _raw_char_count(fragments)
                results.append(reconstruct_page(page_number, fragments))

                pct = round(done / len(targets) * 100)
                reporter.emit(
                    "extracting",
                    f"Extracting text... {pct}% ({done}/{len(targets)} pages)",
                    percent=pct,
                )

            scanned = await self._classify_scanned(doc, raw_chars)

        result = DocumentExtractionResult(pages=tuple(results), total_pages=total, is_likely_scanned=scanned)
        logger.info(
            "pdf.extracted",
            extra={
                "file_name": source.file_name,
                "backend": self.backend.name,
                "total_pages": total,
                "pages_requested": len(targets),
                "pages_with_text": result.pages_with_text,
                "is_likely_scanned": scanned,
            },
        )
        return result

    async def extract_full(self, source: PdfSource, progress: ProgressLike = None) -> str:
        reporter = as_reporter(progress)
        result = await self.extract(source, None, reporter)
        return self.finalize_text(result, reporter)

    async def extract_subset(self, source: PdfSource, pages: Iterable[int], progress: ProgressLike = None) -> str:
        wanted = set(pages or [])
        if not wanted:
            raise _invalid_selection("Select at least one page to extract")

        reporter = as_reporter(progress)
        result = await self.extract(source, wanted, reporter)
        return self.finalize_text(result, reporter)

    async def get_page_previews(self, source: PdfSource, max_pages: int | None = None) -> PagePreviews:
        limit = settings.PREVIEW_MAX_PAGES if max_pages is None else max_pages

        async with open_document(self.backend, source.data) as doc:
            total = doc.page_count
            previews: list[PageExtraction] = []
            for page_number in range(1, min(limit, total) + 1):
                fragments = await self._page_fragments(doc, page_number)
                page = reconstruct_page(page_number, fragments)
                previews.append(
                    PageExtraction(
                        page_number=page.page_number,
                        text=page.text[: self.preview_chars],
                        word_count=page.word_count,
                        has_text=page.has_text,
                    )
                )

        return PagePreviews(total_pages=total, previews=tuple(previews))

    async def is_likely_scanned(self, source: PdfSource) -> bool:
        """Heuristic for image-only PDFs; any failure reports False."""
        try:
            async with open_document(self.backend, source.data) as doc:
                return await self._classify_scanned(doc, {})
        except Exception as e:
            logger.warning("pdf.scan_check_failed", extra={"file_name": source.file_name, "error": str(e)})
            return False

    def finalize_text(self, result: DocumentExtractionResult, progress: ProgressLike = None) -> str:
        """Sanitize the joined page text; an empty result is an EmptyDocument error."""
        reporter = as_reporter(progress)
        reporter.emit("cleaning", "Cleaning extracted text...")
        text = clean_extracted_text(result.text)
        if not text:
            raise AppError(
                code=ErrorCode.EMPTY_DOCUMENT,
                reason=ErrorReason.PDF_NO_TEXT,
                message="Could not extract any text. The PDF may be a scanned image or contain no readable text.",
                status_code=422,
                details={"total_pages": result.total_pages, "is_likely_scanned": result.is_likely_scanned},
            )
        reporter.emit("completed", "Text extraction complete!", percent=100)
        return text

    # ----------------------------
    # Helpers
    # ----------------------------
    def _resolve_pages(self, pages: Iterable[int] | None, total: int) -> list[int]:
        if pages is None:
            return list(range(1, total + 1))

        wanted = set(pages)
        if not wanted:
            raise _invalid_selection("Select at least one page to extract")

        valid = sorted(p for p in wanted if 1 <= p <= total)
        if not valid:
            raise _invalid_selection(
                f"No selected page is within 1..{total}",
                details={"pages": sorted(wanted), "total_pages": total},
            )

        ignored = sorted(wanted.difference(valid))
        if ignored:
            logger.info("pdf.pages_ignored", extra={"ignored": ignored, "total_pages": total})
        return valid

    async def _page_fragments(self, doc: DocumentHandle, page_number: int) -> list[PositionedTextFragment]:
        try:
            return await run_in_threadpool(doc.page_fragments, page_number - 1)
        except Exception:
            logger.warning("pdf.page_failed", extra={"page_number": page_number}, exc_info=True)
            return []

    async def _classify_scanned(self, doc: DocumentHandle, known: dict[int, int]) -> bool:
        sample = min(self.scanned_sample_pages, doc.page_count)
        if sample <= 0:
            return False

        total_chars = 0
        for page_number in range(1, sample + 1):
            if page_number not in known:
                known[page_number] = _raw_char_count(await self._page_fragments(doc, page_number))
            total_chars += known[page_number]

        return (total_chars / sample) < self.scanned_min_avg_chars


def _raw_char_count(fragments: list[PositionedTextFragment]) -> int:
    return len("".join(f.text for f in fragments if isinstance(f.text, str)).strip())
