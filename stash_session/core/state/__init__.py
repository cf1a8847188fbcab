from stash_session.core.state.stash import StashSessionState

__all__ = ["StashSessionState"]
