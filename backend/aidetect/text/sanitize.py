"""aidetect/text/sanitize.py

Text normalization shared by the PDF pipeline and the detection client.

- normalize(): HTML fragment -> plain text, mojibake repair, whitespace collapse.
- validate_for_analysis(): length gate in front of the detection service.
- text_stats(): word/char/sentence counts and reading time.

All functions are pure and never raise.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from aidetect.core import ErrorCode, ErrorReason
from aidetect.core.config import settings

WORDS_PER_MINUTE = 200

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_PARAGRAPH_RE = re.compile(r"</p>\s*<p[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_MANY_NEWLINES_RE = re.compile(r"\n{3,}")
_SPACES_RE = re.compile(r"[ \t]+")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufffd]")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

# &amp; last within a single pass
_ENTITIES: list[tuple[str, str]] = [
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    ("\u00a0", " "),
    ("&amp;", "&"),
]

# UTF-8 punctuation read back as cp1252 (first block) or latin-1 (second block).
# The bare two-character prefix goes last: it catches a closing double quote
# whose third byte was dropped.
_MOJIBAKE: list[tuple[str, str]] = [
    ("â€™", "'"),  # right single quote
    ("â€˜", "'"),  # left single quote
    ("â€œ", '"'),  # left double quote
    ("â€\u009d", '"'),  # right double quote
    ("â€“", "–"),  # en dash
    ("â€”", "—"),  # em dash
    ("â€¢", "•"),  # bullet
    ("â\u0080\u0099", "'"),
    ("â\u0080\u0098", "'"),
    ("â\u0080\u009c", '"'),
    ("â\u0080\u009d", '"'),
    ("â\u0080\u0093", "–"),
    ("â\u0080\u0094", "—"),
    ("â\u0080¢", "•"),
    ("â€", '"'),
]


@dataclass(frozen=True)
class ValidationOutcome:
    valid: bool
    text: str = ""
    error: str | None = None
    code: ErrorCode | None = None


@dataclass(frozen=True)
class TextStats:
    word_count: int
    char_count: int
    sentence_count: int
    reading_time_minutes: int


def repair_mojibake(text: str) -> str:
    for bad, good in _MOJIBAKE:
        if bad in text:
            text = text.replace(bad, good)
    return text


def _strip_markup(text: str) -> str:
    text = _BR_RE.sub("\n", text)
    text = _PARAGRAPH_RE.sub("\n\n", text)
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return repair_mojibake(text)


def normalize(raw) -> str:
    """Plain text from an HTML fragment.

    Escaped markup ("&lt;br&gt;", "&amp;lt;b&amp;gt;") decodes into real markup,
    so the markup pass repeats until nothing changes. Every replacement shortens
    the text or removes a non-breaking space, so the loop terminates, and
    normalize(normalize(t)) == normalize(t).
    """
    if not raw or not isinstance(raw, str):
        return ""

    text = raw
    while True:
        stripped = _strip_markup(text)
        if stripped == text:
            break
        text = stripped

    text = _MANY_NEWLINES_RE.sub("\n\n", text)
    text = _SPACES_RE.sub(" ", text)
    return text.strip()


def clean_extracted_text(raw) -> str:
    """Scrub control characters and U+FFFD left by PDF decoding, then normalize."""
    if not raw or not isinstance(raw, str):
        return ""
    return normalize(_CONTROL_RE.sub(" ", raw))


def validate_for_analysis(raw) -> ValidationOutcome:
    if not isinstance(raw, str):
        return ValidationOutcome(valid=False, error=ErrorReason.INVALID_INPUT.value, code=ErrorCode.INVALID_INPUT)

    text = normalize(raw)

    if len(text) < settings.MIN_TEXT_LENGTH:
        return ValidationOutcome(valid=False, error=ErrorReason.TEXT_TOO_SHORT.value, code=ErrorCode.TEXT_TOO_SHORT)

    if len(text) > settings.MAX_TEXT_LENGTH:
        return ValidationOutcome(valid=False, error=ErrorReason.TEXT_TOO_LONG.value, code=ErrorCode.TEXT_TOO_LONG)

    return ValidationOutcome(valid=True, text=text)


def count_words(text: str) -> int:
    return len((text or "").split())


def count_sentences(text: str) -> int:
    return len([s for s in _SENTENCE_SPLIT_RE.split(text or "") if s.strip()])


def text_stats(text: str) -> TextStats:
    words = count_words(text)
    return TextStats(
        word_count=words,
        char_count=len(text or ""),
        sentence_count=count_sentences(text),
        reading_time_minutes=math.ceil(words / WORDS_PER_MINUTE),
    )
