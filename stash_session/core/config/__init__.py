from stash_session.core.config.loader import load_session_config
from stash_session.core.config.models import DEFAULT_EXPIRES_SECONDS, DEFAULT_STASH_KEY, SessionStateConfig

__all__ = [
    "DEFAULT_EXPIRES_SECONDS",
    "DEFAULT_STASH_KEY",
    "SessionStateConfig",
    "load_session_config",
]
