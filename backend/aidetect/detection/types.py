# aidetect/detection/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from aidetect.core.errors import AppError


class TaskStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    ERROR = "error"


@dataclass
class DetectionTask:
    task_id: str
    submitted_text: str
    status: TaskStatus = TaskStatus.PENDING
    attempts: int = 0

    def finish(self, status: TaskStatus) -> None:
        # Pending -> Done | Error, exactly once
        if self.status is not TaskStatus.PENDING:
            raise RuntimeError(f"task {self.task_id} already {self.status.value}")
        if status is TaskStatus.PENDING:
            raise ValueError("cannot transition back to pending")
        self.status = status


ResultSchema = Literal["detailed", "legacy"]


@dataclass(frozen=True)
class DetectionResult:
    ai_probability: int                     # 0..100
    human_probability: int                  # 100 - ai_probability
    confidence_score: int                   # 0..100
    word_count: int
    char_count: int
    sentence_count: int
    reading_time_minutes: int
    schema: ResultSchema = "legacy"
    per_tool_scores: dict[str, float] = field(default_factory=dict)
    overall_score: float | None = None

    @property
    def message(self) -> str:
        return f"AI: {self.ai_probability}%, Human: {self.human_probability}%"


@dataclass(frozen=True)
class TextChunk:
    index: int                              # 1-based
    text: str
    word_count: int


@dataclass(frozen=True)
class ChunkOutcome:
    chunk_index: int
    word_count: int
    result: DetectionResult | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class ChunkSummary:
    total_chunks: int
    succeeded: int
    failed: int
    ai_probability: int | None              # word-weighted over successful chunks
    human_probability: int | None
    analyzed_words: int
