import pytest

from form_engine.logic.conditional import evaluate_conditional_logic, evaluate_rule, visible_fields
from form_engine.schemas.registration_form import ConditionalLogic, ConditionalRule, CustomField, FormDefinition


def _field(fid, logic=None, type_="text"):
    return CustomField(id=fid, label=fid.upper(), type=type_, conditional_logic=logic)


def _logic(rules, action="show", logic_type="all", enabled=True):
    return ConditionalLogic(
        enabled=enabled,
        action=action,
        logic_type=logic_type,
        rules=[ConditionalRule(field_id=f, operator=op, value=v) for f, op, v in rules],
    )


A = _field("a", type_="select")


def test_field_without_logic_is_always_visible():
    b = _field("b")
    assert evaluate_conditional_logic(b, {}, [A, b])
    assert evaluate_conditional_logic(b, None, [A, b])


def test_disabled_or_ruleless_logic_is_visible():
    b = _field("b", _logic([("a", "equals", "Yes")], enabled=False))
    c = _field("c", _logic([]))
    assert evaluate_conditional_logic(b, {"a": "No"}, [A, b])
    assert evaluate_conditional_logic(c, {"a": "No"}, [A, c])


def test_show_when_answer_matches():
    b = _field("b", _logic([("a", "equals", "Yes")]))
    assert evaluate_conditional_logic(b, {"a": "Yes"}, [A, b]) is True
    assert evaluate_conditional_logic(b, {"a": "No"}, [A, b]) is False
    assert evaluate_conditional_logic(b, {}, [A, b]) is False


def test_hide_is_the_complement_of_show():
    rules = [("a", "contains", "ye"), ("a", "is_not_empty", None)]
    for values in ({"a": "Yes"}, {"a": "no"}, {}, {"a": ""}):
        for logic_type in ("all", "any"):
            show = _field("b", _logic(rules, "show", logic_type))
            hide = _field("b", _logic(rules, "hide", logic_type))
            assert evaluate_conditional_logic(show, values, [A]) != evaluate_conditional_logic(hide, values, [A])


def test_any_is_or_and_all_is_and():
    rules = [("a", "equals", "x"), ("a", "equals", "y")]
    any_f = _field("b", _logic(rules, logic_type="any"))
    all_f = _field("b", _logic(rules, logic_type="all"))
    assert evaluate_conditional_logic(any_f, {"a": "y"}, [A])
    assert not evaluate_conditional_logic(all_f, {"a": "y"}, [A])


def test_dangling_rule_fails_closed():
    b = _field("b", _logic([("ghost", "is_empty", None)]))
    assert evaluate_conditional_logic(b, {}, [A, b]) is False
    hidden_by_default = _field("c", _logic([("ghost", "is_empty", None)], action="hide"))
    assert evaluate_conditional_logic(hidden_by_default, {}, [A]) is True


def test_unknown_operator_is_false():
    rule = ConditionalRule(field_id="a", operator="regex", value=".*")
    assert evaluate_rule(rule, {"a": "anything"}, {"a"}) is False


def test_stored_unknown_operator_loads_and_hides_the_field():
    definition = FormDefinition.from_registration_settings(
        {
            "customFields": [
                {"id": "a", "label": "A", "type": "text"},
                {
                    "id": "b",
                    "label": "B",
                    "type": "text",
                    "conditionalLogic": {
                        "enabled": True,
                        "logicType": "some",
                        "rules": [{"fieldId": "a", "operator": "starts_with", "value": "x"}],
                    },
                },
            ]
        }
    )
    b = definition.field_by_id("b")
    assert b.conditional_logic.rules[0].operator == "starts_with"
    assert evaluate_conditional_logic(b, {"a": "xyz"}, definition.fields) is False


def test_rules_read_nested_values_for_dotted_sources():
    source = _field("registrationSettings.maxAttendees", type_="number")
    note = _field("note", _logic([("registrationSettings.maxAttendees", "greater_than", "10")]))
    nested = {"registrationSettings": {"maxAttendees": 50}}
    assert evaluate_conditional_logic(note, nested, [source, note]) is True
    assert evaluate_conditional_logic(note, {"registrationSettings.maxAttendees": 5}, [source, note]) is False


@pytest.mark.parametrize(
    "operator,value,compare,expected",
    [
        ("equals", 5, "5", True),
        ("equals", 5.0, "5", True),
        ("equals", True, "true", True),
        ("equals", None, "", True),
        ("not_equals", "a", "b", True),
        ("contains", "Hello World", "WORLD", True),
        ("contains", ["red", "blue"], "blue", True),
        ("not_contains", "Hello", "xyz", True),
        ("greater_than", "10", "9", True),
        ("greater_than", "abc", "1", False),
        ("greater_than", "", "-1", False),
        ("less_than", 3, "3.5", True),
        ("less_than", None, "1", False),
        ("is_empty", "   ", None, True),
        ("is_empty", 0, None, False),
        ("is_empty", False, None, False),
        ("is_not_empty", "x", None, True),
    ],
)
def test_operator_coercion(operator, value, compare, expected):
    rule = ConditionalRule(field_id="a", operator=operator, value=compare)
    assert evaluate_rule(rule, {"a": value}, {"a"}) is expected


def test_evaluation_never_raises_on_odd_input():
    b = _field("b", _logic([("a", "greater_than", "1")]))
    assert evaluate_conditional_logic(b, "not a mapping", [A, b]) is False
    assert evaluate_conditional_logic(b, {"a": object()}, [A, b]) is False


def test_visible_fields_filters_in_order():
    b = _field("b", _logic([("a", "equals", "Yes")]))
    c = _field("c")
    assert [f.id for f in visible_fields([A, b, c], {"a": "No"}, [A, b, c])] == ["a", "c"]
    assert [f.id for f in visible_fields([A, b, c], {"a": "Yes"}, [A, b, c])] == ["a", "b", "c"]


@pytest.mark.parametrize("value", [None, "", "  ", "x", 0, 1.5, False, True, [], ["a"], {"k": 1}])
def test_emptiness_checks_are_exclusive(value):
    empty = evaluate_rule(ConditionalRule(field_id="a", operator="is_empty"), {"a": value}, {"a"})
    not_empty = evaluate_rule(ConditionalRule(field_id="a", operator="is_not_empty"), {"a": value}, {"a"})
    assert empty != not_empty


def test_flipping_one_rule_flips_an_all_group():
    rules = [("a", "equals", "yes"), ("c", "greater_than", "2")]
    b = _field("b", _logic(rules))
    c = _field("c", type_="number")
    assert evaluate_conditional_logic(b, {"a": "yes", "c": 3}, [A, b, c])
    assert not evaluate_conditional_logic(b, {"a": "yes", "c": 1}, [A, b, c])
    assert not evaluate_conditional_logic(b, {"a": "no", "c": 3}, [A, b, c])
