"""
Locate the session slot inside the stash.

A configured key such as "123/456" with delimiter "/" addresses
stash["123"]["456"]; missing levels are created on the way down.
"""

from __future__ import annotations

from typing import Any, MutableMapping, Optional, Sequence, Tuple

from stash_session.core.config.models import DEFAULT_STASH_KEY
from stash_session.core.errors import StashSlotConflictError


def stash_key_components(stash_key: Optional[str], stash_delim: Optional[str] = None) -> Tuple[str, ...]:
    key = stash_key or DEFAULT_STASH_KEY
    if not stash_delim:
        return (key,)
    parts = key.split(stash_delim)
    # trailing empty fields go, so "/" split on "/" leaves no segments (the stash root)
    while parts and parts[-1] == "":
        parts.pop()
    return tuple(parts)


def resolve_session_slot(stash: MutableMapping[str, Any], components: Sequence[str]) -> MutableMapping[str, Any]:
    ref: MutableMapping[str, Any] = stash
    for depth, segment in enumerate(components):
        value = ref.get(segment)
        if isinstance(value, MutableMapping):
            ref = value
            continue
        if value:
            raise StashSlotConflictError(
                segment=segment,
                path=list(components[: depth + 1]),
                found_type=type(value).__name__,
            )
        # None, "", 0 and friends are overwritten
        ref[segment] = {}
        ref = ref[segment]
    return ref
