# aidetect/services/detection_service.py
"""
detection_service.py
- Purpose: Runs one detection, or a chunked detection when the text is longer
  than one chunk, and maps results to the API DTO.
"""

import logging

from aidetect.core.config import settings
from aidetect.core.progress import ProgressReporter
from aidetect.detection.chunking import ChunkedDetectionOrchestrator, summarize
from aidetect.detection.client import DetectionClient
from aidetect.schemas.detection import (
    ChunkOutcomeOut,
    ChunkSummaryOut,
    DetectionResultOut,
    DetectRequest,
    DetectResponse,
)
from aidetect.schemas.pdf import ProgressEventOut
from aidetect.text.sanitize import count_words, normalize

logger = logging.getLogger("aidetect.detection_service")


class DetectionService:
    def __init__(self, client: DetectionClient):
        self.client = client
        self.orchestrator = ChunkedDetectionOrchestrator(client)

    async def detect(self, req: DetectRequest) -> DetectResponse:
        max_words = settings.MAX_CHUNK_WORDS if req.max_words_per_chunk is None else req.max_words_per_chunk
        words = count_words(normalize(req.text))
        reporter = ProgressReporter()

        if words <= max_words:
            result = await self.client.detect(req.text, reporter)
            return DetectResponse(
                mode="single",
                result=DetectionResultOut.from_result(result),
                progress=[ProgressEventOut.from_event(e) for e in reporter.events],
            )

        logger.info("detection.chunked", extra={"words": words, "max_words": max_words})
        outcomes = await self.orchestrator.detect_in_chunks(normalize(req.text), max_words, reporter)
        return DetectResponse(
            mode="chunked",
            chunks=[ChunkOutcomeOut.from_outcome(o) for o in outcomes],
            summary=ChunkSummaryOut.from_summary(summarize(outcomes)),
            progress=[ProgressEventOut.from_event(e) for e in reporter.events],
        )
