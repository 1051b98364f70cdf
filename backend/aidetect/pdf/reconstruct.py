"""aidetect/pdf/reconstruct.py

Page text reconstruction from positioned fragments.

Content streams store text in drawing order, not reading order. We regroup
fragments into baseline-aligned lines, order them top-to-bottom, and rebuild
paragraph blocks from sentence boundaries.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Iterable

from aidetect.pdf.types import PageExtraction, PositionedTextFragment

logger = logging.getLogger("aidetect.pdf.reconstruct")

LINE_TOLERANCE = 2.0
WORD_GAP_THRESHOLD = 5.0
SENTENCES_PER_PARAGRAPH = 4

_WS_RE = re.compile(r"\s+")
_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


@dataclass
class ReconstructedLine:
    y: float
    fragments: list[PositionedTextFragment]

    @property
    def text(self) -> str:
        ordered = sorted(self.fragments, key=lambda f: f.x)
        out = ""
        prev: PositionedTextFragment | None = None
        for frag in ordered:
            if prev is not None:
                gap = frag.x - (prev.x + prev.width)
                if gap > WORD_GAP_THRESHOLD:
                    out += " "
            out += frag.text
            prev = frag
        return out


def _coerce_fragment(item: Any) -> PositionedTextFragment | None:
    """Accept fragments or fragment-like mappings; None for anything malformed."""
    if isinstance(item, PositionedTextFragment):
        frag = item
    elif isinstance(item, dict):
        try:
            frag = PositionedTextFragment(
                text=item["text"],
                x=float(item["x"]),
                y=float(item["y"]),
                width=float(item.get("width") or 0.0),
            )
        except (KeyError, TypeError, ValueError):
            return None
    else:
        return None

    if not isinstance(frag.text, str) or not frag.text.strip():
        return None
    if not all(math.isfinite(v) for v in (frag.x, frag.y, frag.width)):
        return None
    return frag


def group_into_lines(
    fragments: Iterable[Any],
    tolerance: float = LINE_TOLERANCE,
) -> list[ReconstructedLine]:
    """Group fragments by baseline and return lines ordered top-to-bottom."""
    lines: list[ReconstructedLine] = []
    for item in fragments:
        frag = _coerce_fragment(item)
        if frag is None:
            continue

        target = None
        for line in reversed(lines):
            if abs(line.y - frag.y) < tolerance:
                target = line
                break

        if target is None:
            lines.append(ReconstructedLine(y=frag.y, fragments=[frag]))
        else:
            target.fragments.append(frag)

    # PDF y grows upward: larger baseline is higher on the page
    lines.sort(key=lambda ln: ln.y, reverse=True)
    return lines


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_BOUNDARY_RE.split(text) if s.strip()]


def build_paragraphs(raw: str, sentences_per_paragraph: int = SENTENCES_PER_PARAGRAPH) -> str:
    collapsed = _WS_RE.sub(" ", raw).strip()
    if not collapsed:
        return ""

    sentences = split_sentences(collapsed)
    blocks = [
        " ".join(sentences[i : i + sentences_per_paragraph])
        for i in range(0, len(sentences), sentences_per_paragraph)
    ]
    return "\n\n".join(blocks)


def reconstruct_text(fragments: Iterable[Any]) -> str:
    lines = group_into_lines(fragments)
    raw = "\n".join(line.text for line in lines)
    return build_paragraphs(raw)


def reconstruct_page(page_number: int, fragments: Iterable[Any]) -> PageExtraction:
    """Never raises: a broken page degrades to empty text."""
    try:
        text = reconstruct_text(fragments)
    except Exception:
        logger.warning("page.reconstruct_failed", extra={"page_number": page_number}, exc_info=True)
        text = ""

    return PageExtraction(
        page_number=page_number,
        text=text,
        word_count=len(text.split()),
        has_text=bool(text),
    )
