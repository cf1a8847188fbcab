from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from stash_session.core.events import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class StashSessionError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": redact(self.context or {}),
        }


class ConfigError(StashSessionError):
    def __init__(self, user_message: str = "Session state configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class StashSlotConflictError(StashSessionError):
    def __init__(self, user_message: str = "Stash key path is occupied by a non-mapping value.", **ctx: Any):
        super().__init__("stash_slot_conflict", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class ChainError(StashSessionError):
    def __init__(self, user_message: str = "Invalid session state handler chain.", **ctx: Any):
        super().__init__("chain_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class ContextMissingError(StashSessionError):
    def __init__(self, user_message: str = "No session context for this request.", **ctx: Any):
        super().__init__("context_missing", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)
