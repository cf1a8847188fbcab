from __future__ import annotations

import pytest

from stash_session.core.config import SessionStateConfig
from stash_session.core.context import new_request_context
from stash_session.core.state import StashSessionState


@pytest.fixture
def request_context():
    """A fresh per-request context with an empty stash."""
    return new_request_context()


@pytest.fixture
def stash_state():
    cfg = SessionStateConfig()
    st = StashSessionState(cfg)
    st.setup_session(cfg)
    return st
