from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STASH_KEY = "_session"
DEFAULT_EXPIRES_SECONDS = 7200


class SessionStateConfig(BaseModel):
    # Shared with sibling session plugins (stores, the session layer), so
    # options this package does not know about are kept rather than rejected.
    model_config = ConfigDict(extra="allow", validate_assignment=True)

    stash_key: Optional[str] = None
    stash_delim: Optional[str] = None
    expires: int = Field(default=DEFAULT_EXPIRES_SECONDS, ge=0)

    @field_validator("stash_delim")
    @classmethod
    def _empty_delim_is_unset(cls, v: Optional[str]) -> Optional[str]:
        return v or None
