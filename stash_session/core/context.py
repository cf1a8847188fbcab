from __future__ import annotations

import contextlib
import contextvars
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional


def new_trace_id() -> str:
    return uuid.uuid4().hex


@dataclass
class SessionRequestContext:
    """
    Everything the session state chain may touch while one request is handled.

    `stash` belongs to the host; the flags start unset for every request.
    `session_state` is the head of the handler chain serving the request, so
    a handler deep in the chain can ask the whole chain again.
    """

    stash: Dict[str, Any] = field(default_factory=dict)
    trace_id: str = field(default_factory=new_trace_id)
    deleted_session_id: bool = False
    prepared: bool = False
    session_id: Optional[str] = None
    session_state: Any = None


def new_request_context(
    stash: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None,
    session_state: Any = None,
) -> SessionRequestContext:
    return SessionRequestContext(
        stash=stash if stash is not None else {},
        trace_id=trace_id or new_trace_id(),
        session_state=session_state,
    )


_CURRENT: contextvars.ContextVar[Optional[SessionRequestContext]] = contextvars.ContextVar(
    "stash_session.request_context", default=None
)


def current_request_context() -> Optional[SessionRequestContext]:
    return _CURRENT.get()


@contextlib.contextmanager
def request_context_scope(ctx: SessionRequestContext) -> Iterator[SessionRequestContext]:
    token = _CURRENT.set(ctx)
    try:
        yield ctx
    finally:
        _CURRENT.reset(token)
