# aidetect/detection/provider.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from aidetect.core import ErrorCode, ErrorReason
from aidetect.core.config import settings
from aidetect.core.errors import upstream_error
from aidetect.detection.errors import DetectionRetryableError
from aidetect.detection.responses import PollBody, classify_poll_body, extract_task_id

logger = logging.getLogger("aidetect.detection.provider")


def _json_or_none(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError):
        return None


@dataclass
class DetectionProvider:
    """
    HTTP adapter for the remote detection service.
    Single-attempt per call. The poll loop and its delays live in detection/client.py.
    """
    base_url: str = field(default_factory=lambda: settings.DETECTION_BASE_URL)
    submit_path: str = field(default_factory=lambda: settings.DETECTION_SUBMIT_PATH)
    result_path: str = field(default_factory=lambda: settings.DETECTION_RESULT_PATH)
    http: Optional[httpx.AsyncClient] = None
    _owned: Optional[httpx.AsyncClient] = field(default=None, init=False, repr=False)

    def _client(self) -> httpx.AsyncClient:
        if self.http is not None:
            return self.http
        if self._owned is None:
            self._owned = httpx.AsyncClient(headers={"Content-Type": "application/json"})
        return self._owned

    def _url(self, path: str) -> str:
        return self.base_url.rstrip("/") + "/" + path.lstrip("/")

    async def aclose(self) -> None:
        if self._owned is not None:
            await self._owned.aclose()
            self._owned = None

    async def submit(self, text: str) -> str:
        """POST the content and return the remote task id."""
        try:
            resp = await self._client().post(
                self._url(self.submit_path),
                json={"content": text},
                timeout=settings.SUBMIT_TIMEOUT_SECONDS,
            )
        except (httpx.TimeoutException, TimeoutError) as e:
            raise upstream_error(
                ErrorReason.NETWORK_FAILED,
                code=ErrorCode.NETWORK_ERROR,
                status_code=504,
                message=f"Detection submit timed out: {e}",
            ) from e
        except httpx.HTTPError as e:
            raise upstream_error(
                ErrorReason.NETWORK_FAILED,
                code=ErrorCode.NETWORK_ERROR,
                message=f"Detection submit failed: {e}",
            ) from e

        if resp.status_code == 429:
            raise upstream_error(ErrorReason.TOO_MANY_REQUESTS, code=ErrorCode.RATE_LIMITED, status_code=429)
        if resp.status_code == 403:
            raise upstream_error(ErrorReason.NOT_AUTHORIZED, code=ErrorCode.FORBIDDEN)
        if resp.is_error:
            raise upstream_error(
                ErrorReason.SUBMIT_REJECTED,
                code=ErrorCode.SUBMIT_REJECTED,
                details={"upstream_status": resp.status_code},
            )

        task_id = extract_task_id(_json_or_none(resp), resp.text)
        if not task_id:
            raise upstream_error(
                ErrorReason.SUBMIT_REJECTED,
                code=ErrorCode.SUBMIT_REJECTED,
                message="Detection service response did not contain a task id",
            )
        return task_id

    async def query(self, task_id: str) -> PollBody:
        """One poll attempt. 404 is terminal; anything transient raises DetectionRetryableError."""
        try:
            resp = await self._client().post(
                self._url(self.result_path),
                json={"id": task_id},
                timeout=settings.POLL_TIMEOUT_SECONDS,
            )
        except (httpx.TimeoutException, TimeoutError) as e:
            raise DetectionRetryableError(f"poll timed out: {e}") from e
        except httpx.HTTPError as e:
            raise DetectionRetryableError(f"poll http error: {e}") from e

        if resp.status_code == 404:
            raise upstream_error(
                ErrorReason.TASK_NOT_FOUND,
                code=ErrorCode.TASK_NOT_FOUND,
                details={"task_id": task_id},
            )
        if resp.is_error:
            raise DetectionRetryableError(f"poll returned HTTP {resp.status_code}")

        data = _json_or_none(resp)
        if data is None:
            raise DetectionRetryableError("poll body is not JSON")
        return classify_poll_body(data)
