"""
Request/Task context helpers.

We keep a small context (request_id, task_id, document) in ContextVars.
Both FastAPI middleware and Celery tasks can set these values so logs become
correlatable across the pipeline.

No external dependencies.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, Optional


_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_task_id: ContextVar[Optional[str]] = ContextVar("task_id", default=None)
_document: ContextVar[Optional[str]] = ContextVar("document", default=None)


def set_context(
    *,
    request_id: Optional[str] = None,
    task_id: Optional[str] = None,
    document: Optional[str] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if task_id is not None:
        _task_id.set(task_id)
    if document is not None:
        _document.set(document)


def clear_context() -> None:
    _request_id.set(None)
    _task_id.set(None)
    _document.set(None)


def get_context() -> Dict[str, Any]:
    ctx: Dict[str, Any] = {}
    rid = _request_id.get()
    tid = _task_id.get()
    doc = _document.get()

    if rid:
        ctx["request_id"] = rid
    if tid:
        ctx["task_id"] = tid
    if doc:
        ctx["document"] = doc
    return ctx
