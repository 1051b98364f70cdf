import math

from aidetect.pdf.reconstruct import group_into_lines, reconstruct_page, reconstruct_text
from aidetect.pdf.types import PositionedTextFragment


def test_gap_above_threshold_inserts_space():
    frags = [
        {"text": "Hello", "x": 0, "y": 100, "width": 30},
        {"text": "World", "x": 40, "y": 100, "width": 30},
    ]
    lines = group_into_lines(frags)
    assert [ln.text for ln in lines] == ["Hello World"]


def test_small_gap_joins_without_space():
    frags = [
        PositionedTextFragment("Hel", 0, 100, 15),
        PositionedTextFragment("lo", 18, 100, 10),
    ]
    assert reconstruct_text(frags) == "Hello"


def test_fragments_sorted_left_to_right_within_line():
    frags = [
        PositionedTextFragment("World", 40, 100, 30),
        PositionedTextFragment("Hello", 0, 100.5, 30),
    ]
    assert [ln.text for ln in group_into_lines(frags)] == ["Hello World"]


def test_lines_ordered_top_to_bottom():
    frags = [
        PositionedTextFragment("Bottom", 0, 50, 30),
        PositionedTextFragment("Top", 0, 100, 20),
    ]
    lines = group_into_lines(frags)
    assert [ln.text for ln in lines] == ["Top", "Bottom"]


def test_line_tolerance_is_strict():
    same = group_into_lines([PositionedTextFragment("a", 0, 100, 5), PositionedTextFragment("b", 20, 101.5, 5)])
    split = group_into_lines([PositionedTextFragment("a", 0, 100, 5), PositionedTextFragment("b", 20, 102, 5)])
    assert len(same) == 1
    assert len(split) == 2


def test_malformed_and_blank_fragments_are_dropped():
    frags = [
        {"text": None, "x": 0, "y": 10, "width": 5},
        {"text": "   ", "x": 0, "y": 10, "width": 5},
        {"text": "nan", "x": math.nan, "y": 10, "width": 5},
        {"x": 0, "y": 10},
        "not a fragment",
        {"text": "kept", "x": 0, "y": 10, "width": 20},
    ]
    assert reconstruct_text(frags) == "kept"


def test_empty_page_has_no_text():
    page = reconstruct_page(2, [])
    assert page.page_number == 2
    assert page.text == ""
    assert page.has_text is False
    assert page.word_count == 0


def test_sentences_regrouped_into_paragraphs_of_four():
    frags = [
        PositionedTextFragment("One. Two! Three?", 0, 100, 80),
        PositionedTextFragment("Four. Five.", 0, 80, 60),
    ]
    assert reconstruct_text(frags) == "One. Two! Three? Four.\n\nFive."


def test_decimal_points_do_not_split_sentences():
    frags = [PositionedTextFragment("Pi is 3.14 today. Next.", 0, 100, 120)]
    assert reconstruct_text(frags) == "Pi is 3.14 today. Next."


def test_reconstruct_page_never_raises():
    def broken():
        yield {"text": "ok", "x": 0, "y": 0, "width": 5}
        raise RuntimeError("content stream truncated")

    page = reconstruct_page(3, broken())
    assert page.text == ""
    assert page.has_text is False
