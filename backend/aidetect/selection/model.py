# aidetect/selection/model.py
"""
Page selection as an immutable state plus pure transitions.

Every transition returns a new PageSelectionState; nothing here touches a
document or a presentation layer. `select_all` is always derived as
len(selected) == total_pages so it cannot drift from the selection itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.pdf.types import PageExtraction


@dataclass(frozen=True)
class PageSelectionState:
    total_pages: int
    previews: tuple[PageExtraction, ...] = ()
    selected: frozenset[int] = field(default_factory=frozenset)

    @property
    def select_all(self) -> bool:
        return self.total_pages > 0 and len(self.selected) == self.total_pages


def _with(state: PageSelectionState, selected: Iterable[int]) -> PageSelectionState:
    return PageSelectionState(
        total_pages=state.total_pages,
        previews=state.previews,
        selected=frozenset(selected),
    )


def _all_pages(total_pages: int) -> frozenset[int]:
    return frozenset(range(1, total_pages + 1))


def initialize(previews: Iterable[PageExtraction], total_pages: int) -> PageSelectionState:
    if total_pages < 0:
        raise AppError(
            code=ErrorCode.INVALID_SELECTION,
            reason=ErrorReason.INVALID_SELECTION,
            status_code=422,
            details={"total_pages": total_pages},
        )
    return PageSelectionState(
        total_pages=total_pages,
        previews=tuple(previews),
        selected=_all_pages(total_pages),
    )


def toggle(state: PageSelectionState, page_number: int) -> PageSelectionState:
    if not 1 <= page_number <= state.total_pages:
        raise AppError(
            code=ErrorCode.INVALID_SELECTION,
            reason=ErrorReason.INVALID_SELECTION,
            message=f"Page {page_number} is outside 1..{state.total_pages}",
            status_code=422,
            details={"page_number": page_number, "total_pages": state.total_pages},
        )
    return _with(state, state.selected ^ {page_number})


def select_all(state: PageSelectionState) -> PageSelectionState:
    return _with(state, _all_pages(state.total_pages))


def clear(state: PageSelectionState) -> PageSelectionState:
    return _with(state, ())


def toggle_all(state: PageSelectionState) -> PageSelectionState:
    return clear(state) if state.select_all else select_all(state)


def sorted_pages(state: PageSelectionState) -> list[int]:
    return sorted(state.selected)


def has_unpreviewed_pages(state: PageSelectionState) -> bool:
    return len(state.previews) < state.total_pages
