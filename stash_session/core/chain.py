"""
Explicit delegation chain for session state handlers.

Each handler does its own work and then hands the call to `next_handler`.
The base class only forwards, so a handler overrides just the operations it
cares about. At the end of the chain every operation returns None.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from stash_session.core.config.models import SessionStateConfig
from stash_session.core.context import SessionRequestContext
from stash_session.core.errors import ChainError


class SessionStateHandler:
    name = "base"

    def __init__(self, next_handler: Optional["SessionStateHandler"] = None) -> None:
        self.next_handler = next_handler

    # ---- lifecycle hooks ----
    def setup_session(self, config: SessionStateConfig) -> SessionStateConfig:
        if self.next_handler is not None:
            self.next_handler.setup_session(config)
        return config

    def prepare_action(self, ctx: SessionRequestContext) -> None:
        if self.next_handler is not None:
            self.next_handler.prepare_action(ctx)

    # ---- accessors ----
    def get_session_id(self, ctx: SessionRequestContext) -> Optional[str]:
        if self.next_handler is None:
            return None
        return self.next_handler.get_session_id(ctx)

    def set_session_id(self, ctx: SessionRequestContext, sid: str) -> Any:
        if self.next_handler is None:
            return None
        return self.next_handler.set_session_id(ctx, sid)

    def get_session_expires(self, ctx: SessionRequestContext) -> Optional[int]:
        if self.next_handler is None:
            return None
        return self.next_handler.get_session_expires(ctx)

    def set_session_expires(self, ctx: SessionRequestContext, seconds: int) -> Any:
        if self.next_handler is None:
            return None
        return self.next_handler.set_session_expires(ctx, seconds)

    def delete_session_id(self, ctx: SessionRequestContext, sid: Optional[str]) -> Any:
        if self.next_handler is None:
            return None
        return self.next_handler.delete_session_id(ctx, sid)

    def __repr__(self) -> str:
        nxt = self.next_handler.name if self.next_handler is not None else None
        return f"<{type(self).__name__} name={self.name!r} next={nxt!r}>"


def chain(*handlers: SessionStateHandler) -> SessionStateHandler:
    """Link handlers front to back and return the head."""
    if not handlers:
        raise ChainError("At least one session state handler is required.")
    seen = set()
    for h in handlers:
        if id(h) in seen:
            raise ChainError("Handler appears twice in the chain.", handler=h.name)
        seen.add(id(h))
        if h.next_handler is not None:
            raise ChainError("Handler is already linked to another chain.", handler=h.name)
    for current, following in zip(handlers, handlers[1:]):
        current.next_handler = following
    return handlers[0]


def iter_chain(head: Optional[SessionStateHandler]) -> Iterator[SessionStateHandler]:
    seen = set()
    h = head
    while h is not None:
        if id(h) in seen:
            raise ChainError("Session state chain contains a cycle.", handler=h.name)
        seen.add(id(h))
        yield h
        h = h.next_handler
