"""
progress.py
- Purpose: Explicit observer for long-running extraction/detection steps.
- Design: Producers call emit(); subscribers receive ProgressEvent in emit order.
  Every event is also recorded so callers can inspect the sequence afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

logger = logging.getLogger("aidetect.progress")


@dataclass(frozen=True)
class ProgressEvent:
    step: str
    message: str
    percent: int | None = None


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    def __init__(self, *subscribers: ProgressCallback):
        self._subscribers: list[ProgressCallback] = list(subscribers)
        self.events: list[ProgressEvent] = []
        self._last_percent: dict[str, int] = {}

    def subscribe(self, callback: ProgressCallback) -> None:
        self._subscribers.append(callback)

    def emit(self, step: str, message: str, percent: int | None = None) -> ProgressEvent:
        if percent is not None:
            # percent never moves backwards within a step
            percent = max(0, min(100, int(percent)))
            percent = max(percent, self._last_percent.get(step, 0))
            self._last_percent[step] = percent

        event = ProgressEvent(step=step, message=message, percent=percent)
        self.events.append(event)

        for cb in list(self._subscribers):
            try:
                cb(event)
            except Exception:
                # fire-and-forget
                logger.exception("progress.subscriber_failed", extra={"step": step})
        return event

    @property
    def steps(self) -> list[str]:
        return [e.step for e in self.events]


ProgressLike = Union[ProgressReporter, ProgressCallback, None]


def as_reporter(progress: ProgressLike) -> ProgressReporter:
    if isinstance(progress, ProgressReporter):
        return progress
    if progress is None:
        return ProgressReporter()
    return ProgressReporter(progress)
