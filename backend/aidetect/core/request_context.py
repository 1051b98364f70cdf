"""
Request/Task context helpers.

We keep a small context (request_id, task_id, file_name, chunk_index) in ContextVars.
The HTTP middleware and the detection client both set these values so logs for
one upload -> extract -> detect flow become correlatable.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_task_id: ContextVar[Optional[str]] = ContextVar("task_id", default=None)
_file_name: ContextVar[Optional[str]] = ContextVar("file_name", default=None)
_chunk_index: ContextVar[Optional[int]] = ContextVar("chunk_index", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    task_id: Optional[str] = None,
    file_name: Optional[str] = None,
    chunk_index: Optional[int] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if task_id is not None:
        _task_id.set(task_id)
    if file_name is not None:
        _file_name.set(file_name)
    if chunk_index is not None:
        _chunk_index.set(chunk_index)


def clear_context() -> None:
    _request_id.set(None)
    _task_id.set(None)
    _file_name.set(None)
    _chunk_index.set(None)


def clear_task_id() -> None:
    _task_id.set(None)


def clear_detection_context() -> None:
    _task_id.set(None)
    _chunk_index.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    tid = _task_id.get()
    fname = _file_name.get()
    chunk = _chunk_index.get()

    if rid:
        ctx["request_id"] = rid
    if tid:
        ctx["task_id"] = tid
    if fname:
        ctx["file_name"] = fname
    if chunk is not None:
        ctx["chunk_index"] = chunk
    return ctx
