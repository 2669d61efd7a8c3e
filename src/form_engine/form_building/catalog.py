from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from form_engine.schemas.registration_form import FieldValidation

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
EMAIL_PATTERN_MESSAGE = "Please enter a valid email address"

DEFAULT_OPTIONS: Tuple[str, ...] = ("Option 1", "Option 2")


@dataclass(frozen=True)
class FieldTypeConfig:
    """Builder palette entry for one field type."""

    type: str
    label: str
    icon: str
    description: str
    has_options: bool
    has_validation: bool
    default_validation: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def build_default_validation(self) -> Optional[FieldValidation]:
        # Always a fresh model; the catalog entry itself stays untouched.
        if not self.default_validation:
            return None
        return FieldValidation(**dict(self.default_validation))


def _entry(
    type_: str,
    label: str,
    icon: str,
    description: str,
    *,
    has_options: bool = False,
    has_validation: bool = False,
    default_validation: Optional[Dict[str, Any]] = None,
) -> FieldTypeConfig:
    return FieldTypeConfig(
        type=type_,
        label=label,
        icon=icon,
        description=description,
        has_options=has_options,
        has_validation=has_validation,
        default_validation=MappingProxyType(dict(default_validation or {})),
    )


# Palette order as shown in the form builder.
FIELD_TYPE_CONFIGS: Tuple[FieldTypeConfig, ...] = (
    _entry("text", "Text", "Type", "Single line text input", has_validation=True, default_validation={"max_length": 255}),
    _entry("textarea", "Long Text", "AlignLeft", "Multi-line text area", has_validation=True, default_validation={"max_length": 1000}),
    _entry(
        "email",
        "Email",
        "Mail",
        "Email address with validation",
        has_validation=True,
        default_validation={"pattern": EMAIL_PATTERN, "pattern_message": EMAIL_PATTERN_MESSAGE},
    ),
    _entry("phone", "Phone", "Phone", "Phone number input", has_validation=True),
    _entry("number", "Number", "Hash", "Numeric input with min/max", has_validation=True),
    _entry("date", "Date", "Calendar", "Date picker"),
    _entry("time", "Time", "Clock", "Time picker"),
    _entry("select", "Dropdown", "ChevronDown", "Single select dropdown", has_options=True),
    _entry("radio", "Radio", "Circle", "Single choice radio buttons", has_options=True),
    _entry("checkbox", "Checkbox", "CheckSquare", "Single yes/no checkbox"),
    _entry("multi-checkbox", "Multi-Select", "ListChecks", "Multiple checkbox selection", has_options=True),
    _entry("rating", "Rating", "Star", "Star rating (1-5)", has_validation=True, default_validation={"min": 1, "max": 5}),
)

_CONFIGS_BY_TYPE: Mapping[str, FieldTypeConfig] = MappingProxyType({c.type: c for c in FIELD_TYPE_CONFIGS})

CONDITIONAL_OPERATORS: Tuple[Tuple[str, str], ...] = (
    ("equals", "Equals"),
    ("not_equals", "Does not equal"),
    ("contains", "Contains"),
    ("not_contains", "Does not contain"),
    ("greater_than", "Greater than"),
    ("less_than", "Less than"),
    ("is_empty", "Is empty"),
    ("is_not_empty", "Is not empty"),
)

_VALUELESS_OPERATORS = frozenset({"is_empty", "is_not_empty"})

NUMERIC_FIELD_TYPES = frozenset({"number", "rating"})
TEMPORAL_FIELD_TYPES = frozenset({"date", "time"})


def get_field_type_config(type_: Any) -> Optional[FieldTypeConfig]:
    """Catalog lookup; `None` for unknown types."""
    try:
        return _CONFIGS_BY_TYPE.get(str(type_ or "").strip())
    except Exception:
        return None


def field_type_label(type_: Any, fallback: str = "New Field") -> str:
    config = get_field_type_config(type_)
    return config.label if config is not None else fallback


def operator_needs_value(operator: str) -> bool:
    return str(operator or "") not in _VALUELESS_OPERATORS


def operator_label(operator: str) -> str:
    for value, label in CONDITIONAL_OPERATORS:
        if value == operator:
            return label
    return str(operator or "")


def palette() -> List[Dict[str, Any]]:
    """Serializable view of the catalog for a builder UI."""
    return [
        {
            "type": c.type,
            "label": c.label,
            "icon": c.icon,
            "description": c.description,
            "hasOptions": c.has_options,
            "hasValidation": c.has_validation,
        }
        for c in FIELD_TYPE_CONFIGS
    ]
