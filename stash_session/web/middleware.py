from __future__ import annotations

import inspect
import logging
import time
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from stash_session.core.chain import SessionStateHandler
from stash_session.core.context import new_request_context, new_trace_id, request_context_scope
from stash_session.core.errors import StashSessionError
from stash_session.core.events import EventLogger

logger = logging.getLogger(__name__)

StashFactory = Callable[[Request], Any]


class StashSessionMiddleware:
    """
    Per-request session state setup (order matters):
    1) trace_id
    2) the stash: the host's own mapping from stash_factory, else a new dict
    3) request context on request.state and in the context variable
    4) prepare_action through the handler chain
    5) downstream
    """

    def __init__(
        self,
        *,
        handler: SessionStateHandler,
        stash_factory: Optional[StashFactory] = None,
        event_logger: Optional[EventLogger] = None,
    ):
        self.handler = handler
        self.stash_factory = stash_factory
        self.event_logger = event_logger

    async def _new_stash(self, request: Request) -> Dict[str, Any]:
        if self.stash_factory is None:
            return {}
        stash = self.stash_factory(request)
        if inspect.isawaitable(stash):
            stash = await stash
        # the host keeps ownership; write into its mapping, never a copy
        return stash if stash is not None else {}

    async def __call__(self, request: Request, call_next):  # noqa: ANN001
        trace_id = new_trace_id()
        t0 = time.time()
        ctx = new_request_context(await self._new_stash(request), trace_id=trace_id, session_state=self.handler)
        request.state.trace_id = trace_id
        request.state.session_context = ctx
        request.state.session_state = self.handler

        with request_context_scope(ctx):
            try:
                self.handler.prepare_action(ctx)
            except StashSessionError as e:
                logger.error("Session state rejected request code=%s trace_id=%s path=%s", e.code, trace_id, request.url.path)
                return JSONResponse(status_code=500, content={"error": e.code, "message": e.user_message, "trace_id": trace_id})
            if self.event_logger is not None:
                self.event_logger.log(
                    trace_id,
                    "web.session_prepared",
                    {"path": request.url.path, "method": request.method, "has_session": ctx.session_id is not None},
                )
            resp = await call_next(request)

        logger.debug(
            "%s %s -> %s trace_id=%s deleted=%s (%.1f ms)",
            request.method,
            request.url.path,
            resp.status_code,
            trace_id,
            ctx.deleted_session_id,
            (time.time() - t0) * 1000.0,
        )
        return resp
