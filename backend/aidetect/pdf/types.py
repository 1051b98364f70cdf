"""aidetect/pdf/types.py

Lightweight dataclasses for PDF extraction outputs.
Design goals:
- deterministic extraction (no OCR)
- immutable per-page results the UI and detection layer can share
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionedTextFragment:
    text: str
    x: float
    y: float      # baseline, PDF user space (grows upward)
    width: float


@dataclass(frozen=True)
class PageExtraction:
    page_number: int  # 1-based
    text: str
    word_count: int
    has_text: bool


@dataclass(frozen=True)
class DocumentExtractionResult:
    pages: tuple[PageExtraction, ...]
    total_pages: int
    is_likely_scanned: bool

    @property
    def text(self) -> str:
        return "\n\n".join(p.text for p in self.pages if p.has_text)

    @property
    def pages_with_text(self) -> int:
        return sum(1 for p in self.pages if p.has_text)


@dataclass(frozen=True)
class PagePreviews:
    total_pages: int
    previews: tuple[PageExtraction, ...]


@dataclass(frozen=True)
class DocumentMetadata:
    num_pages: int
    file_name: str
    file_size: int
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None
