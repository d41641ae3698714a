from __future__ import annotations

import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


DEBUG = _env_flag("PARSE_CORE_DEBUG")

DEFAULT_LANGUAGE = "solidity"

MAPPING_TEMPLATE = "mapping({key}=>{value})"
