# aidetect/detection/client.py
"""
Submit -> poll -> result against the remote detection service.

    Created -> Submitted -> Polling -> Done | Failed

Submission is a single attempt. Polling makes up to MAX_RETRIES attempts and
waits RETRY_DELAY_MS between them whether the previous attempt failed
transiently or simply was not ready yet. Only a missing task (404) or an
explicit remote error ends polling early.
"""

from __future__ import annotations

import asyncio
import logging
import math
import uuid
from typing import Awaitable, Callable

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.core.config import settings
from aidetect.core.errors import unprocessable, upstream_error
from aidetect.core.progress import ProgressLike, as_reporter
from aidetect.core.request_context import clear_task_id, set_context
from aidetect.detection.errors import DetectionRetryableError
from aidetect.detection.provider import DetectionProvider
from aidetect.detection.responses import DetailedScores, LegacyScore, RemoteFailure
from aidetect.detection.telemetry import DetectionCallLog, log_detection_call, now_ms
from aidetect.detection.types import DetectionResult, DetectionTask, TaskStatus
from aidetect.text.sanitize import text_stats, validate_for_analysis

logger = logging.getLogger("aidetect.detection.client")

Sleep = Callable[[float], Awaitable[None]]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: int, lo: int = 0, hi: int = 100) -> int:
    return max(lo, min(hi, value))


def confidence_for(ai_probability: int) -> int:
    return _clamp(round_half_up((100 - abs(ai_probability - 50)) * 2))


def normalize_result(body: DetailedScores | LegacyScore, submitted_text: str) -> DetectionResult:
    """Map either done-shape onto one DetectionResult; statistics come from the submitted text."""
    if isinstance(body, DetailedScores):
        numeric = body.numeric_scores
        if numeric:
            raw = sum(numeric.values()) / len(numeric)
        else:
            raw = body.overall_score or 0.0
        schema = "detailed"
        per_tool = numeric
        overall = body.overall_score
    else:
        raw = body.result
        schema = "legacy"
        per_tool = {}
        overall = None

    ai = _clamp(round_half_up(raw))
    stats = text_stats(submitted_text)
    return DetectionResult(
        ai_probability=ai,
        human_probability=100 - ai,
        confidence_score=confidence_for(ai),
        word_count=stats.word_count,
        char_count=stats.char_count,
        sentence_count=stats.sentence_count,
        reading_time_minutes=stats.reading_time_minutes,
        schema=schema,
        per_tool_scores=per_tool,
        overall_score=overall,
    )


class DetectionClient:
    def __init__(
        self,
        provider: DetectionProvider | None = None,
        *,
        max_retries: int | None = None,
        retry_delay_seconds: float | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider or DetectionProvider()
        self.max_retries = max_retries if max_retries is not None else settings.MAX_RETRIES
        self.retry_delay_seconds = (
            retry_delay_seconds if retry_delay_seconds is not None else settings.retry_delay_seconds
        )
        self._sleep = sleep

    async def __aenter__(self) -> "DetectionClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.provider.aclose()

    async def submit(self, text: str) -> DetectionTask:
        task_id = await self.provider.submit(text)
        set_context(task_id=task_id)
        logger.info("detection.submitted", extra={"task_id": task_id, "chars": len(text)})
        return DetectionTask(task_id=task_id, submitted_text=text)

    async def poll(self, task: DetectionTask) -> DetectionResult:
        last_err: Exception | None = None

        for attempt in range(self.max_retries):
            task.attempts = attempt + 1
            try:
                body = await self.provider.query(task.task_id)
            except DetectionRetryableError as e:
                last_err = e
                logger.info(
                    "detection.poll_retry",
                    extra={"task_id": task.task_id, "attempt": task.attempts, "error": str(e)},
                )
            except AppError:
                task.finish(TaskStatus.ERROR)
                raise
            else:
                if isinstance(body, (DetailedScores, LegacyScore)):
                    task.finish(TaskStatus.DONE)
                    return normalize_result(body, task.submitted_text)

                if isinstance(body, RemoteFailure):
                    task.finish(TaskStatus.ERROR)
                    raise upstream_error(
                        ErrorReason.ANALYSIS_FAILED,
                        code=ErrorCode.REMOTE_ANALYSIS_ERROR,
                        message=body.message,
                        details={"task_id": task.task_id},
                    )

                last_err = None

            if attempt < self.max_retries - 1:
                await self._sleep(self.retry_delay_seconds)

        task.finish(TaskStatus.ERROR)
        details = {"task_id": task.task_id, "attempts": task.attempts}
        if last_err is not None:
            details["last_error"] = str(last_err)
        raise upstream_error(
            ErrorReason.POLL_TIMEOUT,
            code=ErrorCode.POLL_TIMEOUT,
            status_code=504,
            details=details,
        )

    async def detect(self, text: str, progress: ProgressLike = None) -> DetectionResult:
        reporter = as_reporter(progress)

        outcome = validate_for_analysis(text)
        if not outcome.valid:
            raise unprocessable(outcome.error, code=outcome.code or ErrorCode.INVALID_INPUT)

        trace_id = str(uuid.uuid4())
        start_ms = now_ms()
        task: DetectionTask | None = None

        try:
            reporter.emit("submitting", "Submitting text for analysis...")
            task = await self.submit(outcome.text)

            reporter.emit("processing", "Waiting for analysis results...")
            result = await self.poll(task)
        except AppError as e:
            reporter.emit("error", str(e))
            log_detection_call(
                DetectionCallLog(
                    trace_id=trace_id,
                    task_id=task.task_id if task else None,
                    text_chars=len(outcome.text),
                    latency_ms=(now_ms() - start_ms),
                    attempts=task.attempts if task else 0,
                    ok=False,
                    error_code=e.code.value,
                )
            )
            raise
        finally:
            clear_task_id()

        reporter.emit("completed", "Analysis complete!", percent=100)
        log_detection_call(
            DetectionCallLog(
                trace_id=trace_id,
                task_id=task.task_id,
                text_chars=len(outcome.text),
                latency_ms=(now_ms() - start_ms),
                attempts=task.attempts,
                ok=True,
                schema=result.schema,
            )
        )
        return result
