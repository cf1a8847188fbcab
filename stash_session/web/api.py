from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stash_session.core.chain import SessionStateHandler, iter_chain
from stash_session.core.config import SessionStateConfig, load_session_config
from stash_session.core.context import SessionRequestContext
from stash_session.core.errors import ContextMissingError, StashSessionError
from stash_session.core.events import EventLogger
from stash_session.core.logger import setup_logging
from stash_session.core.state import StashSessionState
from stash_session.web.middleware import StashFactory, StashSessionMiddleware

logger = logging.getLogger(__name__)


def _chain_config(head: SessionStateHandler) -> Optional[SessionStateConfig]:
    for h in iter_chain(head):
        cfg = getattr(h, "config", None)
        if isinstance(cfg, SessionStateConfig):
            return cfg
    return None


def install_stash_session(
    app: FastAPI,
    *,
    handler: Optional[SessionStateHandler] = None,
    config: Union[None, str, Mapping[str, Any], SessionStateConfig] = None,
    stash_factory: Optional[StashFactory] = None,
    event_logger: Optional[EventLogger] = None,
    log_dir: Optional[str] = None,
    log_level: int = logging.INFO,
) -> SessionStateHandler:
    """
    Run setup_session through the chain and register the per-request middleware.

    Without `config`, a handler chain that already carries a config keeps it.
    With `log_dir`, package logs also go to a rotating file there.
    Returns the chain head so callers can keep a reference to it.
    """
    if log_dir is not None:
        setup_logging(log_dir, level=log_level)
    if config is None and handler is not None:
        config = _chain_config(handler)
    cfg = load_session_config(config)
    head = handler if handler is not None else StashSessionState(cfg, event_logger=event_logger)
    head.setup_session(cfg)
    logger.info("Session state chain: %s", " -> ".join(h.name for h in iter_chain(head)))

    app.middleware("http")(StashSessionMiddleware(handler=head, stash_factory=stash_factory, event_logger=event_logger))
    app.state.session_state = head
    app.state.session_config = cfg

    @app.exception_handler(StashSessionError)
    async def stash_session_error_handler(request: Request, exc: StashSessionError):
        trace_id = getattr(getattr(request, "state", None), "trace_id", "web")
        logger.error("Session state error code=%s trace_id=%s context=%s", exc.code, trace_id, exc.to_dict()["context"])
        return JSONResponse(status_code=500, content={"error": exc.code, "message": exc.user_message, "trace_id": trace_id})

    return head


def get_session_context(request: Request) -> SessionRequestContext:
    ctx = getattr(request.state, "session_context", None)
    if ctx is None:
        raise ContextMissingError(path=request.url.path)
    return ctx


def get_session_state(request: Request) -> SessionStateHandler:
    head = getattr(request.state, "session_state", None)
    if head is None:
        raise ContextMissingError("Session state is not installed on this app.", path=request.url.path)
    return head
