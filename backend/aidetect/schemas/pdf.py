"""
pdf.py (schemas)
- Purpose: Response DTOs for the PDF info / preview / extract endpoints.
- Design: Keep API DTOs stable; include helper constructors for DRY mapping.
"""

from typing import Optional

from pydantic import BaseModel

from aidetect.core.progress import ProgressEvent
from aidetect.pdf.types import DocumentMetadata, PageExtraction
from aidetect.selection.model import PageSelectionState, has_unpreviewed_pages, sorted_pages
from aidetect.text.sanitize import TextStats

SCANNED_WARNING = (
    "This PDF looks like a scanned image. Text extraction may return little or no text; "
    "OCR is not supported."
)


class ProgressEventOut(BaseModel):
    step: str
    message: str
    percent: Optional[int] = None

    @classmethod
    def from_event(cls, event: ProgressEvent) -> "ProgressEventOut":
        return cls(step=event.step, message=event.message, percent=event.percent)


class TextStatsOut(BaseModel):
    word_count: int
    char_count: int
    sentence_count: int
    reading_time_minutes: int

    @classmethod
    def from_stats(cls, stats: TextStats) -> "TextStatsOut":
        return cls(
            word_count=stats.word_count,
            char_count=stats.char_count,
            sentence_count=stats.sentence_count,
            reading_time_minutes=stats.reading_time_minutes,
        )


class PdfInfoResponse(BaseModel):
    file_name: str
    file_size: int
    file_size_label: str
    num_pages: int
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    estimated_extraction_seconds: int
    is_likely_scanned: bool
    warning: Optional[str] = None

    @classmethod
    def from_metadata(
        cls,
        meta: DocumentMetadata,
        *,
        file_size_label: str,
        estimated_seconds: int,
        is_likely_scanned: bool,
    ) -> "PdfInfoResponse":
        return cls(
            file_name=meta.file_name,
            file_size=meta.file_size,
            file_size_label=file_size_label,
            num_pages=meta.num_pages,
            title=meta.title,
            author=meta.author,
            subject=meta.subject,
            creator=meta.creator,
            producer=meta.producer,
            creation_date=meta.creation_date,
            modification_date=meta.modification_date,
            estimated_extraction_seconds=estimated_seconds,
            is_likely_scanned=is_likely_scanned,
            warning=SCANNED_WARNING if is_likely_scanned else None,
        )


class PagePreviewOut(BaseModel):
    page_number: int
    text: str
    word_count: int
    has_text: bool

    @classmethod
    def from_page(cls, page: PageExtraction) -> "PagePreviewOut":
        return cls(page_number=page.page_number, text=page.text, word_count=page.word_count, has_text=page.has_text)


class PagePreviewsResponse(BaseModel):
    """
    Previews plus the initial selection (every page selected).
    `has_more_pages` is true when previews cover fewer pages than the document has.
    """
    total_pages: int
    previews: list[PagePreviewOut]
    selected_pages: list[int]
    select_all: bool
    has_more_pages: bool

    @classmethod
    def from_selection(cls, state: PageSelectionState) -> "PagePreviewsResponse":
        return cls(
            total_pages=state.total_pages,
            previews=[PagePreviewOut.from_page(p) for p in state.previews],
            selected_pages=sorted_pages(state),
            select_all=state.select_all,
            has_more_pages=has_unpreviewed_pages(state),
        )


class ExtractResponse(BaseModel):
    file_name: str
    text: str
    pages: list[int]
    total_pages: int
    stats: TextStatsOut
    progress: list[ProgressEventOut]
