"""
Compile a field's declarative validation into enforceable rules, and apply them.

`build_validation_rules` produces a `RuleSet` (constraint name -> value + message)
that any runtime validator can consume; `validate_value` / `validate_fields`
are the engine's own runtime for it, so the wizard does not depend on a UI
binding library to decide whether a step is valid.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from form_engine.form_building.catalog import EMAIL_PATTERN, EMAIL_PATTERN_MESSAGE
from form_engine.logic.values import as_number, as_text, get_path, is_missing
from form_engine.schemas.registration_form import CustomField

logger = logging.getLogger(__name__)

# Order in which rules are checked; the first failure is reported.
RULE_ORDER = ("required", "min_length", "max_length", "min", "max", "pattern")


class CompiledRule(BaseModel):
    value: Any
    message: str

    model_config = ConfigDict(frozen=True)


RuleSet = Dict[str, CompiledRule]


class FieldError(BaseModel):
    field_id: str
    rule: str
    message: str


class ValidationResult(BaseModel):
    errors: Dict[str, FieldError] = Field(default_factory=dict)
    checked: List[str] = Field(default_factory=list, description="Keys that were validated")

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages(self) -> List[str]:
        return [e.message for e in self.errors.values()]

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        errors = dict(self.errors)
        errors.update(other.errors)
        checked = list(self.checked) + [k for k in other.checked if k not in self.checked]
        return ValidationResult(errors=errors, checked=checked)


def _fmt(bound: Any) -> str:
    return as_text(bound)


def _compiles(pattern: str) -> bool:
    try:
        re.compile(pattern)
        return True
    except re.error:
        return False


def build_validation_rules(field: CustomField) -> RuleSet:
    rules: RuleSet = {}
    label = field.label

    if field.required:
        rules["required"] = CompiledRule(value=True, message=f"{label} is required")

    v = field.validation
    if v is not None:
        if v.min_length is not None:
            rules["min_length"] = CompiledRule(
                value=v.min_length, message=f"{label} must be at least {_fmt(v.min_length)} characters"
            )
        if v.max_length is not None:
            rules["max_length"] = CompiledRule(
                value=v.max_length, message=f"{label} must be no more than {_fmt(v.max_length)} characters"
            )
        if v.min is not None:
            rules["min"] = CompiledRule(value=v.min, message=f"{label} must be at least {_fmt(v.min)}")
        if v.max is not None:
            rules["max"] = CompiledRule(value=v.max, message=f"{label} must be no more than {_fmt(v.max)}")
        if v.pattern:
            if _compiles(v.pattern):
                rules["pattern"] = CompiledRule(value=v.pattern, message=v.pattern_message or f"{label} is invalid")
            else:
                logger.warning("dropping invalid pattern on field %s: %r", field.id, v.pattern)

    # The email shape always wins over an author pattern for email fields.
    if field.type == "email":
        rules["pattern"] = CompiledRule(value=EMAIL_PATTERN, message=EMAIL_PATTERN_MESSAGE)

    return rules


def _check(rule_name: str, bound: Any, value: Any) -> bool:
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        # Collections only take part in `required`.
        return True
    if rule_name == "min_length":
        return len(as_text(value)) >= int(bound)
    if rule_name == "max_length":
        return len(as_text(value)) <= int(bound)
    if rule_name in {"min", "max"}:
        n = as_number(value)
        if math.isnan(n):
            return True
        return n >= float(bound) if rule_name == "min" else n <= float(bound)
    if rule_name == "pattern":
        return re.search(str(bound), as_text(value)) is not None
    return True


def validate_value(field_id: str, rules: Mapping[str, CompiledRule], value: Any) -> Optional[FieldError]:
    """Apply a rule set to one value and return the first violation, if any."""
    if is_missing(value):
        required = rules.get("required")
        if required is not None and required.value:
            return FieldError(field_id=field_id, rule="required", message=required.message)
        return None

    for name in RULE_ORDER[1:]:
        rule = rules.get(name)
        if rule is None:
            continue
        if not _check(name, rule.value, value):
            return FieldError(field_id=field_id, rule=name, message=rule.message)
    return None


def validate_fields(
    fields: Iterable[CustomField],
    values: Mapping[str, Any],
    *,
    key_prefix: str = "",
) -> ValidationResult:
    """Validate each field against its compiled rules. Error keys are `key_prefix + field.id`."""
    result = ValidationResult()
    flat = dict(values or {})
    for field in fields:
        key = f"{key_prefix}{field.id}"
        result.checked.append(key)
        error = validate_value(key, build_validation_rules(field), get_path(flat, field.id))
        if error is not None:
            result.errors[key] = error
    return result
