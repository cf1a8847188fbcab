from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional


# Session ids are bearer tokens; never write them out in clear.
REDACT_KEYS = {
    "id",
    "sid",
    "session_id",
    "sessionid",
    "token",
    "secret",
    "password",
    "authorization",
}


def _redact(obj: Any) -> Any:
    if isinstance(obj, dict):
        out: Dict[str, Any] = {}
        for k, v in obj.items():
            if str(k).lower() in REDACT_KEYS:
                out[k] = "***REDACTED***"
            else:
                out[k] = _redact(v)
        return out
    if isinstance(obj, list):
        return [_redact(x) for x in obj]
    return obj


def redact(obj: Any) -> Any:
    return _redact(obj)


@dataclass(frozen=True)
class EventLogger:
    """
    Append-only JSONL log of session state events, one line per event.
    """

    path: str
    _lock: threading.Lock = threading.Lock()

    def log(self, trace_id: str, event_type: str, details: Optional[Dict[str, Any]] = None) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "trace_id": trace_id,
            "event": event_type,
            "details": _redact(details or {}),
        }
        line = json.dumps(payload, ensure_ascii=False)
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
