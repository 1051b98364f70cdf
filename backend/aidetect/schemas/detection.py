"""
detection.py (schemas)
- Purpose: Request/response DTOs for /api/detect.
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from aidetect.core.errors import AppError
from aidetect.detection.types import ChunkOutcome, ChunkSummary, DetectionResult
from aidetect.schemas.pdf import ProgressEventOut


class DetectRequest(BaseModel):
    text: str
    max_words_per_chunk: Optional[int] = Field(default=None, ge=1)


class DetectionResultOut(BaseModel):
    ai_probability: int
    human_probability: int
    confidence_score: int
    message: str
    schema_kind: Literal["detailed", "legacy"]
    detection_scores: dict[str, float] = Field(default_factory=dict)
    overall_score: Optional[float] = None
    word_count: int
    char_count: int
    sentence_count: int
    reading_time_minutes: int

    @classmethod
    def from_result(cls, r: DetectionResult) -> "DetectionResultOut":
        return cls(
            ai_probability=r.ai_probability,
            human_probability=r.human_probability,
            confidence_score=r.confidence_score,
            message=r.message,
            schema_kind=r.schema,
            detection_scores=dict(r.per_tool_scores),
            overall_score=r.overall_score,
            word_count=r.word_count,
            char_count=r.char_count,
            sentence_count=r.sentence_count,
            reading_time_minutes=r.reading_time_minutes,
        )


class ChunkOutcomeOut(BaseModel):
    chunk_index: int
    word_count: int
    result: Optional[DetectionResultOut] = None
    error: Optional[dict[str, Any]] = None

    @classmethod
    def from_outcome(cls, o: ChunkOutcome) -> "ChunkOutcomeOut":
        return cls(
            chunk_index=o.chunk_index,
            word_count=o.word_count,
            result=DetectionResultOut.from_result(o.result) if o.result else None,
            error=_error_body(o.error) if o.error else None,
        )


class ChunkSummaryOut(BaseModel):
    total_chunks: int
    succeeded: int
    failed: int
    ai_probability: Optional[int] = None
    human_probability: Optional[int] = None
    analyzed_words: int

    @classmethod
    def from_summary(cls, s: ChunkSummary) -> "ChunkSummaryOut":
        return cls(
            total_chunks=s.total_chunks,
            succeeded=s.succeeded,
            failed=s.failed,
            ai_probability=s.ai_probability,
            human_probability=s.human_probability,
            analyzed_words=s.analyzed_words,
        )


class DetectResponse(BaseModel):
    mode: Literal["single", "chunked"]
    result: Optional[DetectionResultOut] = None
    chunks: list[ChunkOutcomeOut] = Field(default_factory=list)
    summary: Optional[ChunkSummaryOut] = None
    progress: list[ProgressEventOut] = Field(default_factory=list)


def _error_body(err: AppError) -> dict[str, Any]:
    return err.to_dict()["error"]
