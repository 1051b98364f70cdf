from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from aidetect.core import AppError, ErrorCode, ErrorReason
from aidetect.detection.client import DetectionClient
from aidetect.detection.provider import DetectionProvider
from aidetect.pdf.types import PositionedTextFragment

DETECTOR_URL = "https://detector.test/allin"


@pytest.fixture
def anyio_backend():
    return "asyncio"


def text_page(*lines: str, top: float = 700.0, leading: float = 14.0) -> list[PositionedTextFragment]:
    """One fragment per line, laid out top-to-bottom."""
    return [
        PositionedTextFragment(text=line, x=72.0, y=top - i * leading, width=len(line) * 5.0)
        for i, line in enumerate(lines)
    ]


class FakeHandle:
    def __init__(self, pages, metadata=None, failing=()):
        self._pages = pages
        self._metadata = metadata or {}
        self._failing = set(failing)
        self.page_count = len(pages)
        self.closed = False
        self.requested: list[int] = []

    def metadata(self):
        return dict(self._metadata)

    def page_fragments(self, index: int):
        self.requested.append(index)
        if index in self._failing:
            raise RuntimeError(f"cannot parse page {index + 1}")
        return list(self._pages[index])

    def close(self) -> None:
        self.closed = True


class FakeBackend:
    name = "fake"
    module = "builtins"

    def __init__(self, pages=(), *, metadata=None, failing=(), error: Exception | None = None):
        self.pages = list(pages)
        self.metadata = metadata
        self.failing = failing
        self.error = error
        self.handles: list[FakeHandle] = []

    def open(self, data: bytes) -> FakeHandle:
        if self.error is not None:
            raise self.error
        handle = FakeHandle(self.pages, self.metadata, self.failing)
        self.handles.append(handle)
        return handle


def corrupt_backend() -> FakeBackend:
    return FakeBackend(error=AppError(code=ErrorCode.INVALID_PDF, reason=ErrorReason.PDF_INVALID, status_code=422))


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_detection_client(sleeps) -> Callable[[Callable[[httpx.Request], httpx.Response]], DetectionClient]:
    """Build a DetectionClient whose HTTP traffic goes to `handler` and whose delays are recorded."""

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def _make(handler: Callable[[httpx.Request], Any], **kwargs) -> DetectionClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = DetectionProvider(base_url=DETECTOR_URL, http=http)
        return DetectionClient(provider, sleep=fake_sleep, **kwargs)

    return _make


class FakeDetectionServer:
    """
    Scriptable detection service. `results` is consumed one item per poll;
    the last item repeats. Items are JSON bodies or httpx.Response objects.
    """

    def __init__(self, results, *, task_id: str = "task-1", submit_response: httpx.Response | None = None):
        self.results = list(results)
        self.task_id = task_id
        self.submit_response = submit_response
        self.submits: list[dict] = []
        self.polls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/api/v1/getId"):
            self.submits.append(json.loads(request.content))
            if self.submit_response is not None:
                return self.submit_response
            return httpx.Response(200, json={"id": self.task_id})

        if request.url.path.endswith("/api/v1/result"):
            item = self.results[min(self.polls, len(self.results) - 1)]
            self.polls += 1
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json=item)

        return httpx.Response(404)
