import pytest

from aidetect.core import AppError, ErrorCode
from aidetect.pdf.types import PageExtraction
from aidetect.selection import model as sel


def _previews(n):
    return [PageExtraction(page_number=i, text=f"page {i}", word_count=2, has_text=True) for i in range(1, n + 1)]


def test_initialize_selects_every_page():
    state = sel.initialize(_previews(3), total_pages=5)
    assert sel.sorted_pages(state) == [1, 2, 3, 4, 5]
    assert state.select_all is True
    assert sel.has_unpreviewed_pages(state) is True


def test_toggle_removes_and_adds():
    state = sel.initialize(_previews(3), total_pages=3)
    state = sel.toggle(state, 2)
    assert sel.sorted_pages(state) == [1, 3]
    assert state.select_all is False

    state = sel.toggle(state, 2)
    assert sel.sorted_pages(state) == [1, 2, 3]
    assert state.select_all is True


def test_transitions_do_not_mutate_previous_state():
    before = sel.initialize(_previews(2), total_pages=2)
    after = sel.clear(before)
    assert sel.sorted_pages(before) == [1, 2]
    assert sel.sorted_pages(after) == []


@pytest.mark.parametrize("page", [0, 4, -1])
def test_toggle_out_of_range_raises(page):
    state = sel.initialize(_previews(3), total_pages=3)
    with pytest.raises(AppError) as exc:
        sel.toggle(state, page)
    assert exc.value.code == ErrorCode.INVALID_SELECTION


def test_select_all_and_clear():
    state = sel.clear(sel.initialize([], total_pages=4))
    assert state.select_all is False
    state = sel.select_all(state)
    assert sel.sorted_pages(state) == [1, 2, 3, 4]
    assert state.select_all is True


def test_toggle_all_flips_between_all_and_none():
    state = sel.initialize(_previews(2), total_pages=2)
    state = sel.toggle_all(state)
    assert sel.sorted_pages(state) == []
    state = sel.toggle_all(state)
    assert sel.sorted_pages(state) == [1, 2]


def test_partial_selection_toggle_all_selects_everything():
    state = sel.toggle(sel.initialize(_previews(3), total_pages=3), 1)
    assert sel.sorted_pages(sel.toggle_all(state)) == [1, 2, 3]


def test_sorted_pages_ascending_after_toggles():
    state = sel.clear(sel.initialize(_previews(5), total_pages=5))
    for page in (5, 1, 3):
        state = sel.toggle(state, page)
    assert sel.sorted_pages(state) == [1, 3, 5]


def test_fully_previewed_document():
    state = sel.initialize(_previews(3), total_pages=3)
    assert sel.has_unpreviewed_pages(state) is False
