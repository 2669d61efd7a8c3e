"""
Final value transforms applied when a wizard assembles its submission.

Each transform is a plain callable `(payload, fields) -> payload` and must
return a new dict rather than editing the one it was given.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, Mapping, Sequence

from form_engine.form_building.catalog import NUMERIC_FIELD_TYPES, TEMPORAL_FIELD_TYPES
from form_engine.logic.values import as_number, get_path, is_blank, pop_path, set_path
from form_engine.schemas.registration_form import CustomField

Transform = Callable[[Dict[str, Any], Mapping[str, CustomField]], Dict[str, Any]]


def _copy(payload: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in payload.items():
        out[k] = _copy(v) if isinstance(v, dict) else v
    return out


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    return get_path(dict(payload), key)


def coerce_numeric_strings(payload: Dict[str, Any], fields: Mapping[str, CustomField]) -> Dict[str, Any]:
    """Numeric strings on number/rating fields become int/float; blank optional ones are dropped."""
    out = _copy(payload)
    for key, field in fields.items():
        if field.type not in NUMERIC_FIELD_TYPES:
            continue
        raw = _lookup(out, key)
        if not isinstance(raw, str):
            continue
        if is_blank(raw):
            pop_path(out, key)
            continue
        n = as_number(raw)
        if math.isnan(n):
            continue
        set_path(out, key, int(n) if n.is_integer() else n)
    return out


def drop_empty_optional_dates(payload: Dict[str, Any], fields: Mapping[str, CustomField]) -> Dict[str, Any]:
    out = _copy(payload)
    for key, field in fields.items():
        if field.type in TEMPORAL_FIELD_TYPES and not field.required and is_blank(_lookup(out, key)):
            pop_path(out, key)
    return out


def strip_strings(payload: Dict[str, Any], fields: Mapping[str, CustomField]) -> Dict[str, Any]:
    out = _copy(payload)
    for key in fields:
        raw = _lookup(out, key)
        if isinstance(raw, str):
            set_path(out, key, raw.strip())
    return out


DEFAULT_TRANSFORMS: Sequence[Transform] = (
    strip_strings,
    coerce_numeric_strings,
    drop_empty_optional_dates,
)


def apply_transforms(
    payload: Dict[str, Any],
    fields: Mapping[str, CustomField],
    transforms: Sequence[Transform] = DEFAULT_TRANSFORMS,
) -> Dict[str, Any]:
    out = _copy(payload)
    for transform in transforms:
        out = transform(out, fields)
    return out
