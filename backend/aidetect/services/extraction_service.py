# aidetect/services/extraction_service.py
"""
extraction_service.py
- Purpose: Orchestrates upload -> validate -> extract for the PDF endpoints.
- Owns: upload validation, request context, progress capture, DTO mapping.
- Design: Thick service; routers remain thin and easy to reason about.
"""

import logging

from fastapi import UploadFile

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.core.progress import ProgressReporter
from aidetect.core.request_context import set_context
from aidetect.pdf.extract import PdfDocumentExtractor, estimate_extraction_seconds
from aidetect.schemas.pdf import (
    ExtractResponse,
    PagePreviewsResponse,
    PdfInfoResponse,
    ProgressEventOut,
    TextStatsOut,
)
from aidetect.selection.model import initialize
from aidetect.text.sanitize import text_stats
from aidetect.validations.file_validators import format_file_size, read_pdf_upload

logger = logging.getLogger("aidetect.extraction_service")


def parse_pages(raw: str | None) -> set[int] | None:
    """
    "1,3,5-7" -> {1, 3, 5, 6, 7}. None/blank means every page.
    """
    if raw is None or not raw.strip():
        return None

    pages: set[int] = set()
    try:
        for part in raw.split(","):
            part = part.strip()
            if not part:
                continue
            if "-" in part:
                lo, hi = (int(x) for x in part.split("-", 1))
                if lo > hi:
                    lo, hi = hi, lo
                pages.update(range(lo, hi + 1))
            else:
                pages.add(int(part))
    except ValueError as e:
        raise AppError(
            code=ErrorCode.INVALID_SELECTION,
            reason=ErrorReason.INVALID_SELECTION,
            message=f"Could not parse page list: {raw!r}",
            status_code=422,
        ) from e

    if not pages:
        raise AppError(code=ErrorCode.INVALID_SELECTION, reason=ErrorReason.INVALID_SELECTION, status_code=422)
    return pages


class ExtractionService:
    def __init__(self, extractor: PdfDocumentExtractor):
        self.extractor = extractor

    async def get_info(self, pdf: UploadFile) -> PdfInfoResponse:
        source = await read_pdf_upload(pdf)
        set_context(file_name=source.file_name)

        meta = await self.extractor.get_info(source)
        scanned = await self.extractor.is_likely_scanned(source) if meta.num_pages else False
        if scanned:
            logger.info("pdf.scanned_warning", extra={"num_pages": meta.num_pages})

        return PdfInfoResponse.from_metadata(
            meta,
            file_size_label=format_file_size(source.size),
            estimated_seconds=estimate_extraction_seconds(source.size),
            is_likely_scanned=scanned,
        )

    async def get_previews(self, pdf: UploadFile, max_pages: int | None = None) -> PagePreviewsResponse:
        source = await read_pdf_upload(pdf)
        set_context(file_name=source.file_name)

        previews = await self.extractor.get_page_previews(source, max_pages)
        state = initialize(previews.previews, previews.total_pages)
        return PagePreviewsResponse.from_selection(state)

    async def extract(self, pdf: UploadFile, pages: str | None = None) -> ExtractResponse:
        source = await read_pdf_upload(pdf)
        set_context(file_name=source.file_name)
        wanted = parse_pages(pages)

        reporter = ProgressReporter()
        result = await self.extractor.extract(source, wanted, reporter)
        text = self.extractor.finalize_text(result, reporter)
        used = [p.page_number for p in result.pages]

        logger.info(
            "pdf.extract_done",
            extra={"pages": len(used), "chars": len(text)},
        )
        return ExtractResponse(
            file_name=source.file_name,
            text=text,
            pages=used,
            total_pages=result.total_pages,
            stats=TextStatsOut.from_stats(text_stats(text)),
            progress=[ProgressEventOut.from_event(e) for e in reporter.events],
        )
