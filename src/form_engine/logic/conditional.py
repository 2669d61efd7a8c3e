from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from form_engine.logic.values import as_number, as_text, get_path, is_blank
from form_engine.schemas.registration_form import ConditionalRule, CustomField


def _equals(value: Any, compare: Any) -> bool:
    return as_text(value) == as_text(compare)


def _contains(value: Any, compare: Any) -> bool:
    return as_text(compare).lower() in as_text(value).lower()


def _greater_than(value: Any, compare: Any) -> bool:
    # NaN on either side compares false.
    return as_number(value) > as_number(compare)


def _less_than(value: Any, compare: Any) -> bool:
    return as_number(value) < as_number(compare)


_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "equals": _equals,
    "not_equals": lambda v, c: not _equals(v, c),
    "contains": _contains,
    "not_contains": lambda v, c: not _contains(v, c),
    "greater_than": _greater_than,
    "less_than": _less_than,
    "is_empty": lambda v, _c: is_blank(v),
    "is_not_empty": lambda v, _c: not is_blank(v),
}


def evaluate_rule(rule: ConditionalRule, live_values: Mapping[str, Any], field_ids: Iterable[str]) -> bool:
    """
    Evaluate one rule. A rule on a field that is not part of the form is never
    satisfied, and neither is an unknown operator.
    """
    try:
        if rule.field_id not in field_ids:
            return False
        op = _OPERATORS.get(str(rule.operator))
        if op is None:
            return False
        return bool(op(get_path(live_values, rule.field_id), rule.value))
    except Exception:
        return False


def evaluate_conditional_logic(
    field: CustomField,
    live_values: Optional[Mapping[str, Any]],
    all_fields: Iterable[CustomField],
) -> bool:
    """
    Return True when `field` should render given the current form values.

    Fields without enabled logic, or with no rules, are always visible. Rule
    results are combined with AND (`all`) or OR (`any`); `show` keeps the field
    when the combination holds, `hide` removes it.
    """
    logic = getattr(field, "conditional_logic", None)
    if logic is None or not logic.enabled or not logic.rules:
        return True

    values: Mapping[str, Any] = live_values if isinstance(live_values, Mapping) else {}
    try:
        field_ids = {f.id for f in all_fields or []}
    except Exception:
        field_ids = set()

    results = [evaluate_rule(rule, values, field_ids) for rule in logic.rules]
    condition_met = all(results) if logic.logic_type == "all" else any(results)
    return condition_met if logic.action == "show" else not condition_met


def visible_fields(
    fields: Iterable[CustomField],
    live_values: Optional[Mapping[str, Any]],
    all_fields: Iterable[CustomField],
) -> List[CustomField]:
    everything = list(all_fields)
    return [f for f in fields if evaluate_conditional_logic(f, live_values, everything)]
