from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from stash_session.core.config.models import SessionStateConfig
from stash_session.core.errors import ConfigError

# Blocks searched, in order, when a JSON file holds a whole application config.
SECTION_KEYS = ("Plugin::Session", "session")

ConfigSource = Union[None, str, os.PathLike, Mapping[str, Any], SessionStateConfig]


def read_json_file(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError("Session config file not found.", path=path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError("Session config file is not valid JSON.", path=path, error=str(e)) from e
    if not isinstance(obj, dict):
        raise ConfigError("Session config file must hold a JSON object.", path=path)
    return obj


def _section(data: Mapping[str, Any]) -> Mapping[str, Any]:
    for key in SECTION_KEYS:
        block = data.get(key)
        if isinstance(block, Mapping):
            return block
    return data


def load_session_config(source: ConfigSource = None) -> SessionStateConfig:
    """
    Build a SessionStateConfig from None (defaults), a mapping, an existing
    config object or a path to a JSON file.
    """
    if isinstance(source, SessionStateConfig):
        return source
    raw: Mapping[str, Any]
    path: Optional[str] = None
    if source is None:
        raw = {}
    elif isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        raw = _section(read_json_file(path))
    elif isinstance(source, Mapping):
        raw = _section(source)
    else:
        raise ConfigError("Unsupported session config source.", source_type=type(source).__name__)
    try:
        return SessionStateConfig.model_validate(dict(raw))
    except ValidationError as e:
        raise ConfigError("Invalid session state configuration.", path=path, errors=e.errors(include_url=False)) from e
