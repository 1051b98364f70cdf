from __future__ import annotations

import time
import uuid
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from aidetect.core.request_context import set_context, clear_context


logger = logging.getLogger("aidetect.http")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Accept upstream request id if present, else create one
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        set_context(request_id=rid)

        t0 = time.perf_counter()
        try:
            logger.info(
                "http.request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "content_length": request.headers.get("content-length"),
                },
            )
            response: Response = await call_next(request)
            dt_ms = int((time.perf_counter() - t0) * 1000)

            logger.info(
                "http.response",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": dt_ms,
                },
            )

            response.headers["x-request-id"] = rid
            return response
        finally:
            clear_context()
