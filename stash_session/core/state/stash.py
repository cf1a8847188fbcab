"""
Session state kept in the request stash.

The session id and its expiry live in a nested mapping of the stash found by
following the configured key path. Nothing outlives the request: whatever
carries the stash between requests is the host's business.

Known limitation: once `delete_session_id` ran, `get_session_id` ignores the
stash for the rest of that request, so a session cannot be deleted and
recreated within one request.
"""

from __future__ import annotations

import logging
import time
from typing import Any, MutableMapping, Optional, Tuple

from stash_session.core.chain import SessionStateHandler
from stash_session.core.config.models import DEFAULT_STASH_KEY, SessionStateConfig
from stash_session.core.context import SessionRequestContext
from stash_session.core.events import EventLogger
from stash_session.core.keypath import resolve_session_slot, stash_key_components

logger = logging.getLogger(__name__)


class StashSessionState(SessionStateHandler):
    name = "stash"

    def __init__(
        self,
        config: Optional[SessionStateConfig] = None,
        *,
        next_handler: Optional[SessionStateHandler] = None,
        event_logger: Optional[EventLogger] = None,
    ) -> None:
        super().__init__(next_handler)
        self.config = config or SessionStateConfig()
        self.event_logger = event_logger

    # ---------- internals ----------
    def key_components(self) -> Tuple[str, ...]:
        return stash_key_components(self.config.stash_key, self.config.stash_delim)

    def session_slot(self, ctx: SessionRequestContext) -> MutableMapping[str, Any]:
        return resolve_session_slot(ctx.stash, self.key_components())

    def _store(self, ctx: SessionRequestContext, key: str, value: Any) -> None:
        self.session_slot(ctx)[key] = value

    def _event(self, ctx: SessionRequestContext, event: str, **details: Any) -> None:
        logger.debug("%s trace_id=%s path=%s", event, ctx.trace_id, "/".join(self.key_components()))
        if self.event_logger is not None:
            self.event_logger.log(ctx.trace_id, event, {"path": list(self.key_components()), **details})

    # ---------- lifecycle hooks ----------
    def setup_session(self, config: SessionStateConfig) -> SessionStateConfig:
        super().setup_session(config)
        if not config.stash_key:
            config.stash_key = DEFAULT_STASH_KEY
        self.config = config
        logger.info("Stash session state ready (stash_key=%s, stash_delim=%s)", config.stash_key, config.stash_delim)
        return config

    def prepare_action(self, ctx: SessionRequestContext) -> None:
        # ask the whole chain, including handlers in front of this one
        head = ctx.session_state if ctx.session_state is not None else self
        sid = head.get_session_id(ctx)
        ctx.prepared = True
        if sid:
            ctx.session_id = sid
        super().prepare_action(ctx)

    # ---------- accessors ----------
    def get_session_id(self, ctx: SessionRequestContext) -> Optional[str]:
        if not ctx.deleted_session_id:
            sid = self.session_slot(ctx).get("id")
            if sid:
                return sid
        return super().get_session_id(ctx)

    def set_session_id(self, ctx: SessionRequestContext, sid: str) -> Any:
        self._store(ctx, "id", sid)
        self._event(ctx, "session.id_set", session_id=sid)
        return super().set_session_id(ctx, sid)

    def get_session_expires(self, ctx: SessionRequestContext) -> Optional[int]:
        # Answered from the stash alone; the rest of the chain is not asked.
        return self.session_slot(ctx).get("expires")

    def set_session_expires(self, ctx: SessionRequestContext, seconds: int) -> Any:
        expires = int(time.time()) + int(seconds)
        self._store(ctx, "expires", expires)
        self._event(ctx, "session.expires_set", expires=expires)
        return super().set_session_expires(ctx, seconds)

    def delete_session_id(self, ctx: SessionRequestContext, sid: Optional[str]) -> Any:
        ctx.deleted_session_id = True
        # empty the slot in place; it may be referenced elsewhere in the stash
        self.session_slot(ctx).clear()
        self._event(ctx, "session.deleted", session_id=sid)
        return super().delete_session_id(ctx, sid)
