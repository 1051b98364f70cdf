"""
responses.py
- Purpose: The single place where remote response bodies are interpreted.
- Design: classify_poll_body() turns whatever the service returned into one of
  DetailedScores | LegacyScore | RemoteFailure | NotReady. Callers match on the
  variant type and never probe raw fields themselves.

Observed result bodies:
  detailed: {"success": true, "detection_scores": {"tool": 87.5, ...}, "overall_score": 80}
  legacy:   {"status": "done", "result": 72}
  failure:  {"status": "error", "message": "..."}
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Union

_ID_PATTERNS = (
    re.compile(r'"id"\s*:\s*"([^"]+)"'),
    re.compile(r'"id"\s*:\s*(\d+)'),
    re.compile(r"\bid\s*[=:]\s*([A-Za-z0-9_\-]+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class DetailedScores:
    detection_scores: dict[str, Any] = field(default_factory=dict)
    overall_score: float | None = None

    @property
    def numeric_scores(self) -> dict[str, float]:
        return {k: float(v) for k, v in self.detection_scores.items() if _is_number(v)}


@dataclass(frozen=True)
class LegacyScore:
    result: float


@dataclass(frozen=True)
class RemoteFailure:
    message: str | None = None


@dataclass(frozen=True)
class NotReady:
    status: str | None = None


PollBody = Union[DetailedScores, LegacyScore, RemoteFailure, NotReady]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_number(value: Any) -> float | None:
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        try:
            n = float(value.strip())
        except ValueError:
            return None
        return n if math.isfinite(n) else None
    return None


def classify_poll_body(data: Any) -> PollBody:
    if not isinstance(data, dict):
        return NotReady()

    status = data.get("status")
    status = status.lower() if isinstance(status, str) else None

    if status == "error":
        msg = data.get("message")
        return RemoteFailure(message=str(msg) if msg else None)

    scores = data.get("detection_scores")
    if isinstance(scores, dict) and data.get("success", True) is not False:
        return DetailedScores(detection_scores=dict(scores), overall_score=_as_number(data.get("overall_score")))

    result = _as_number(data.get("result"))
    if result is not None:
        return LegacyScore(result=result)

    # "done" without a usable number is still not a result
    return NotReady(status=status)


def extract_task_id(data: Any, body_text: str = "") -> str | None:
    """Read the task id from a JSON {"id"} body, else pattern-match it out of the raw body."""
    if isinstance(data, dict):
        raw = data.get("id")
        if raw is None and isinstance(data.get("data"), dict):
            raw = data["data"].get("id")
        if raw is not None and str(raw).strip():
            return str(raw).strip()

    for pattern in _ID_PATTERNS:
        m = pattern.search(body_text or "")
        if m:
            return m.group(1)
    return None
