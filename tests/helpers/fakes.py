from __future__ import annotations

from typing import Any, List, Optional, Tuple

from stash_session.core.chain import SessionStateHandler


class RecordingHandler(SessionStateHandler):
    """
    Stands in for a sibling state plugin further down the chain: records every
    call it receives and answers get_session_id with `fallback_id`.
    """

    def __init__(self, name: str = "recording", fallback_id: Optional[str] = None, next_handler=None):
        super().__init__(next_handler)
        self.name = name
        self.fallback_id = fallback_id
        self.calls: List[Tuple[str, Any]] = []

    def setup_session(self, config):
        self.calls.append(("setup_session", config.stash_key))
        return super().setup_session(config)

    def prepare_action(self, ctx):
        self.calls.append(("prepare_action", ctx.session_id))
        super().prepare_action(ctx)

    def get_session_id(self, ctx):
        self.calls.append(("get_session_id", None))
        if self.fallback_id is not None:
            return self.fallback_id
        return super().get_session_id(ctx)

    def set_session_id(self, ctx, sid):
        self.calls.append(("set_session_id", sid))
        return super().set_session_id(ctx, sid)

    def get_session_expires(self, ctx):
        self.calls.append(("get_session_expires", None))
        return super().get_session_expires(ctx)

    def set_session_expires(self, ctx, seconds):
        self.calls.append(("set_session_expires", seconds))
        return super().set_session_expires(ctx, seconds)

    def delete_session_id(self, ctx, sid):
        self.calls.append(("delete_session_id", sid))
        return super().delete_session_id(ctx, sid)

    def names(self) -> List[str]:
        return [c[0] for c in self.calls]
