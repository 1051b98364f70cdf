# aidetect/detection/telemetry.py

import logging
import time
from dataclasses import dataclass

logger = logging.getLogger("detection")

@dataclass
class DetectionCallLog:
    trace_id: str
    task_id: str | None
    text_chars: int
    latency_ms: int
    attempts: int
    ok: bool
    schema: str | None = None
    error_code: str | None = None

def now_ms() -> int:
    return int(time.time() * 1000)

def log_detection_call(item: DetectionCallLog) -> None:
    logger.info(
        "detection_call trace_id=%s task_id=%s chars=%s latency_ms=%s attempts=%s ok=%s schema=%s error=%s",
        item.trace_id,
        item.task_id,
        item.text_chars,
        item.latency_ms,
        item.attempts,
        item.ok,
        item.schema,
        item.error_code,
    )
