"""
chunking.py
- Purpose: Run detection over text longer than one submission allows.
- Design: split on whitespace into fixed word-count chunks, run them one after
  another through DetectionClient.detect, record per-chunk failures and keep
  going. Partial success is a normal end state.

Chunk boundaries may fall mid-sentence; the scorer sees each chunk on its own.
"""

from __future__ import annotations

import logging
from typing import Protocol

from aidetect.core import AppError
from aidetect.core.config import settings
from aidetect.core.errors import internal_error
from aidetect.core.progress import ProgressLike, as_reporter
from aidetect.core.request_context import clear_detection_context, set_context
from aidetect.detection.client import round_half_up
from aidetect.detection.types import ChunkOutcome, ChunkSummary, DetectionResult, TextChunk

logger = logging.getLogger("aidetect.detection.chunking")


class Detector(Protocol):
    async def detect(self, text: str, progress: ProgressLike = None) -> DetectionResult: ...


def split_text_by_word_limit(text: str, max_words: int | None = None) -> list[TextChunk]:
    limit = settings.MAX_CHUNK_WORDS if max_words is None else max_words
    if limit < 1:
        raise ValueError("max_words must be >= 1")

    words = (text or "").split()
    chunks: list[TextChunk] = []
    for start in range(0, len(words), limit):
        part = words[start : start + limit]
        chunks.append(TextChunk(index=len(chunks) + 1, text=" ".join(part), word_count=len(part)))
    return chunks


class ChunkedDetectionOrchestrator:
    def __init__(self, detector: Detector):
        self.detector = detector

    async def detect_in_chunks(
        self,
        text: str,
        max_words: int | None = None,
        progress: ProgressLike = None,
    ) -> list[ChunkOutcome]:
        reporter = as_reporter(progress)
        chunks = split_text_by_word_limit(text, max_words)
        outcomes: list[ChunkOutcome] = []

        try:
            for chunk in chunks:
                set_context(chunk_index=chunk.index)
                reporter.emit("part", f"Processing part {chunk.index} of {len(chunks)}")

                try:
                    result = await self.detector.detect(chunk.text, reporter)
                except AppError as e:
                    logger.warning(
                        "detection.chunk_failed",
                        extra={"chunk_index": chunk.index, "code": e.code.value, "reason": e.reason},
                    )
                    outcomes.append(ChunkOutcome(chunk_index=chunk.index, word_count=chunk.word_count, error=e))
                    continue
                except Exception as e:
                    logger.exception("detection.chunk_crashed", extra={"chunk_index": chunk.index})
                    outcomes.append(
                        ChunkOutcome(
                            chunk_index=chunk.index,
                            word_count=chunk.word_count,
                            error=internal_error(details={"error": str(e)}),
                        )
                    )
                    continue

                outcomes.append(ChunkOutcome(chunk_index=chunk.index, word_count=chunk.word_count, result=result))
        finally:
            clear_detection_context()

        logger.info(
            "detection.chunks_done",
            extra={
                "chunks": len(outcomes),
                "failed": sum(1 for o in outcomes if not o.ok),
            },
        )
        return outcomes


def summarize(outcomes: list[ChunkOutcome]) -> ChunkSummary:
    ok = [o for o in outcomes if o.ok]
    words = sum(o.word_count for o in ok)

    ai: int | None = None
    if ok:
        if words > 0:
            weighted = sum(o.result.ai_probability * o.word_count for o in ok) / words
        else:
            weighted = sum(o.result.ai_probability for o in ok) / len(ok)
        ai = max(0, min(100, round_half_up(weighted)))

    return ChunkSummary(
        total_chunks=len(outcomes),
        succeeded=len(ok),
        failed=len(outcomes) - len(ok),
        ai_probability=ai,
        human_probability=None if ai is None else 100 - ai,
        analyzed_words=words,
    )
