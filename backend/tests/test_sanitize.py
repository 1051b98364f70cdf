import pytest

from aidetect.core import ErrorCode
from aidetect.text.sanitize import clean_extracted_text, normalize, text_stats, validate_for_analysis


def test_normalize_turns_html_into_plain_text():
    raw = "<p>First paragraph<br>second line</p>  <p class='x'>Next <b>bold</b></p>"
    assert normalize(raw) == "First paragraph\nsecond line\n\nNext bold"


def test_normalize_decodes_entities_after_stripping_tags():
    raw = "Tom &amp; Jerry &lt;3 &quot;hi&quot; it&#39;s&nbsp;fine ok"
    assert normalize(raw) == 'Tom & Jerry <3 "hi" it\'s fine ok'


def test_normalize_repairs_mojibake():
    raw = "Itâ€™s â€œquotedâ€\u009d â€” yes â€“ no â€¢ item"
    assert normalize(raw) == "It's \"quoted\" — yes – no • item"


def test_normalize_collapses_whitespace():
    assert normalize("  a \t\t b\n\n\n\n\nc  ") == "a b\n\nc"


@pytest.mark.parametrize("raw", [None, "", 42, ["text"]])
def test_normalize_is_total(raw):
    assert normalize(raw) == ""


def test_normalize_decodes_escaped_markup_to_plain_text():
    assert normalize("&amp;lt;tag&amp;gt; stays quiet") == "stays quiet"
    assert normalize("Use &lt;br&gt; to break") == "Use \n to break"


@pytest.mark.parametrize(
    "raw",
    [
        "<p>One &amp; two</p><p>Three   four</p>\n\n\n\nFive â€” six",
        "Use &lt;br&gt; to break a line in HTML please",
        "escaped &amp;lt;b&amp;gt; markup stays text here",
        "&amp;amp;amp;lt;p&amp;amp;amp;gt;deeply nested escapes",
        "&lt;/p&gt;  &lt;p&gt; split &amp;nbsp; words â&amp;#39;",
        "Tom &amp; Jerry &lt;3 forever",
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_clean_extracted_text_scrubs_control_characters():
    assert clean_extracted_text("Hel\x00lo�world\x07!") == "Hel lo world !"
    assert clean_extracted_text("keeps\ttabs\nand lines") == "keeps tabs\nand lines"


def test_validate_rejects_short_text():
    outcome = validate_for_analysis("  <b>short</b>  ")
    assert not outcome.valid
    assert outcome.code == ErrorCode.TEXT_TOO_SHORT
    assert "minimum 10" in outcome.error


def test_validate_rejects_long_text():
    outcome = validate_for_analysis("x" * 50_001)
    assert not outcome.valid
    assert outcome.code == ErrorCode.TEXT_TOO_LONG


def test_validate_rejects_non_string():
    outcome = validate_for_analysis(1234567890)
    assert not outcome.valid
    assert outcome.code == ErrorCode.INVALID_INPUT


def test_validate_returns_normalized_text():
    outcome = validate_for_analysis("<p>Hello   there, world</p>")
    assert outcome.valid
    assert outcome.text == "Hello there, world"
    assert outcome.error is None


def test_text_stats():
    stats = text_stats("One two three. Four five! Six?")
    assert stats.word_count == 6
    assert stats.sentence_count == 3
    assert stats.char_count == len("One two three. Four five! Six?")
    assert stats.reading_time_minutes == 1


def test_text_stats_reading_time_rounds_up():
    assert text_stats("word " * 201).reading_time_minutes == 2
    assert text_stats("").reading_time_minutes == 0
