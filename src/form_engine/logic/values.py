from __future__ import annotations

import math
from typing import Any, Mapping


def as_text(value: Any) -> str:
    """Loose string form of a live form value, used by rule comparisons."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(as_text(v) for v in value)
    return str(value)


def as_number(value: Any) -> float:
    """Numeric form of a value; NaN when it does not read as a number."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        t = value.strip()
        if not t:
            return math.nan
        try:
            return float(t)
        except ValueError:
            return math.nan
    return math.nan


def is_blank(value: Any) -> bool:
    return value is None or as_text(value).strip() == ""


def is_missing(value: Any) -> bool:
    """Whether a value fails a `required` check: blank, empty collection, or an unticked box."""
    if value is False:
        return True
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return is_blank(value)


def get_path(values: Any, key: str) -> Any:
    """Look up `key` in a value mapping; dotted keys walk nested mappings when there is no flat entry."""
    if not isinstance(values, Mapping):
        return None
    if key in values:
        return values[key]
    current: Any = values
    for part in str(key).split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


def set_path(payload: dict, key: str, value: Any) -> None:
    """Write `key`, creating nested mappings for dotted keys that have no flat entry."""
    if key in payload or "." not in key:
        payload[key] = value
        return
    parts = key.split(".")
    current = payload
    for part in parts[:-1]:
        nxt = current.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            current[part] = nxt
        current = nxt
    current[parts[-1]] = value


def pop_path(payload: dict, key: str) -> None:
    if key in payload or "." not in key:
        payload.pop(key, None)
        return
    parts = key.split(".")
    current: Any = payload
    for part in parts[:-1]:
        current = current.get(part) if isinstance(current, dict) else None
        if current is None:
            return
    if isinstance(current, dict):
        current.pop(parts[-1], None)
