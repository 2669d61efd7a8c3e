import asyncio

import pytest

from form_engine.errors import WizardStateError
from form_engine.schemas.registration_form import ConditionalLogic, ConditionalRule, CustomField, FieldValidation
from form_engine.wizard.collections import RepeatableCollection
from form_engine.wizard.controller import WizardController, WizardStep


class FakeSink:
    def __init__(self, response=None, error=None):
        self.calls = []
        self.response = response if response is not None else {"id": "reg-1"}
        self.error = error

    async def submit(self, payload):
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


FIELDS = [
    CustomField(id="name", label="Name", type="text", required=True),
    CustomField(id="attending", label="Attending", type="select", options=["Yes", "No"]),
    CustomField(
        id="guests",
        label="Guests",
        type="number",
        required=True,
        validation=FieldValidation(min=0, max=5),
        conditional_logic=ConditionalLogic(
            enabled=True,
            action="show",
            logic_type="all",
            rules=[ConditionalRule(field_id="attending", operator="equals", value="Yes")],
        ),
    ),
    CustomField(id="notes", label="Notes", type="textarea", validation=FieldValidation(max_length=10)),
]


def _wizard(**kwargs):
    steps = [
        WizardStep(title="You", fields=("name", "attending", "guests")),
        WizardStep(title="Extras", fields=("notes",)),
    ]
    return WizardController(steps, FIELDS, **kwargs)


def test_wizard_needs_steps():
    with pytest.raises(WizardStateError):
        WizardController([], FIELDS)


def test_initial_state():
    w = _wizard()
    assert w.current_step == 1
    assert w.total_steps == 2
    assert w.is_first_step
    assert not w.is_last_step
    assert w.progress == 50
    assert w.completed_steps == []


def test_next_is_blocked_by_errors_on_the_current_step():
    w = _wizard()
    result = w.next()
    assert not result.is_valid
    assert w.current_step == 1
    assert result.errors["name"].message == "Name is required"
    assert w.error_count_for_step(1) == 1


def test_hidden_fields_are_not_validated():
    w = _wizard(initial_values={"name": "Ada", "attending": "No"})
    assert w.next().is_valid
    assert w.current_step == 2
    assert w.completed_steps == [1]


def test_shown_field_becomes_required():
    w = _wizard(initial_values={"name": "Ada", "attending": "Yes"})
    result = w.next()
    assert list(result.errors) == ["guests"]
    w.set_value("guests", "2")
    assert w.next().is_valid
    assert w.current_step == 2


def test_previous_is_a_noop_on_the_first_step():
    w = _wizard()
    w.previous()
    assert w.current_step == 1


def test_next_on_the_last_step_stays_put():
    w = _wizard(initial_values={"name": "Ada"})
    w.go_to(2)
    assert w.next().is_valid
    assert w.current_step == 2
    assert 2 in w.completed_steps


def test_go_to_is_clamped():
    w = _wizard()
    w.go_to(99)
    assert w.current_step == 2
    w.go_to(-3)
    assert w.current_step == 1


def test_values_are_a_copy():
    w = _wizard(initial_values={"name": "Ada"})
    snapshot = w.values
    snapshot["name"] = "Grace"
    assert w.get_value("name") == "Ada"


def test_submit_only_from_the_last_step():
    w = _wizard(initial_values={"name": "Ada"})
    with pytest.raises(WizardStateError):
        asyncio.run(w.submit(FakeSink()))


def test_submit_sends_visible_transformed_values():
    w = _wizard(initial_values={"name": "  Ada  ", "attending": "No", "guests": "3", "notes": "hi"})
    w.next()
    sink = FakeSink()
    outcome = asyncio.run(w.submit(sink))
    assert outcome.ok
    assert outcome.response == {"id": "reg-1"}
    assert sink.calls == [{"name": "Ada", "attending": "No", "notes": "hi"}]
    assert not w.is_submitting


def test_submit_coerces_numbers_for_shown_fields():
    w = _wizard(initial_values={"name": "Ada", "attending": "Yes", "guests": "3"})
    w.go_to(2)
    outcome = asyncio.run(w.submit(FakeSink()))
    assert outcome.payload["guests"] == 3


def test_failing_submit_jumps_to_first_invalid_step():
    w = _wizard(initial_values={"notes": "far too long for this"})
    w.go_to(2)
    sink = FakeSink()
    outcome = asyncio.run(w.submit(sink))
    assert not outcome.ok
    assert outcome.failed_step == 1
    assert w.current_step == 1
    assert set(outcome.errors) == {"name", "notes"}
    assert sink.calls == []
    assert w.error_count_for_step(2) == 1


def test_sink_errors_propagate_and_clear_submitting():
    w = _wizard(initial_values={"name": "Ada"})
    w.go_to(2)
    with pytest.raises(RuntimeError):
        asyncio.run(w.submit(FakeSink(error=RuntimeError("db down"))))
    assert not w.is_submitting


def test_dotted_keys_nest_in_the_submission():
    fields = [CustomField(id="location.name", label="Venue", type="text", required=True)]
    w = WizardController([WizardStep(title="Where", fields=("location.name",))], fields)
    w.set_value("location.name", "Main hall")
    assert w.next().is_valid
    assert w.build_submission() == {"location": {"name": "Main hall"}}


def test_collections_validate_with_their_step():
    rows = [CustomField(id="role", label="Role", type="text", required=True)]
    team = RepeatableCollection("team", rows, label="Team", min_rows=1)
    steps = [WizardStep(title="Team", fields=("team",))]
    w = WizardController(steps, [], collections=[team])
    result = w.next()
    assert result.errors["team"].message == "Team needs at least 1 entry"

    row = w.collection("team").add_row()
    result = w.next()
    assert list(result.errors) == [f"team.{row.row_id}.role"]

    w.collection("team").update_row(row.row_id, role="Lead")
    assert w.next().is_valid
    assert w.build_submission() == {"team": [{"role": "Lead"}]}

    with pytest.raises(WizardStateError):
        w.set_value("team", [])


def test_step_summaries_report_errors():
    w = _wizard()
    w.next()
    summary = w.step_summaries()
    assert summary[0]["active"] is True
    assert summary[0]["errorCount"] == 1
    assert summary[1]["completed"] is False


def test_visibility_follows_nested_initial_values():
    fields = [
        CustomField(id="registrationSettings.maxAttendees", label="Max", type="number"),
        CustomField(
            id="note",
            label="Note",
            type="text",
            conditional_logic=ConditionalLogic(
                enabled=True,
                rules=[
                    ConditionalRule(field_id="registrationSettings.maxAttendees", operator="greater_than", value="10")
                ],
            ),
        ),
    ]
    steps = [WizardStep(title="Settings", fields=("registrationSettings.maxAttendees", "note"))]
    w = WizardController(steps, fields, initial_values={"registrationSettings": {"maxAttendees": 50}})
    assert w.get_value("registrationSettings.maxAttendees") == 50
    assert w.is_visible("note")
