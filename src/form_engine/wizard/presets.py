"""
Step partitions for the two wizards the events module ships.

- `registration_wizard`: the public event registration form built from an
  event's form definition.
- `event_wizard`: the event editor (details + registration settings) with its
  repeatable committee rows.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from form_engine.form_building.builder import fields_for_section, log_reference_issues, sorted_sections, unassigned_fields
from form_engine.schemas.registration_form import CustomField, FieldValidation, FormDefinition
from form_engine.wizard.collections import RepeatableCollection
from form_engine.wizard.controller import WizardController, WizardStep
from form_engine.wizard.lookup import MemberLookup

TERMS_FIELD_ID = "termsAccepted"

PERSONAL_INFO_FIELDS: List[CustomField] = [
    CustomField(id="firstName", label="First name", type="text", required=True, placeholder="John"),
    CustomField(id="lastName", label="Last name", type="text", required=True, placeholder="Doe"),
    CustomField(id="email", label="Email address", type="email", placeholder="john.doe@example.com"),
    CustomField(id="phone", label="Phone number", type="phone", placeholder="+234..."),
    CustomField(id="gender", label="Gender", type="select", options=["Male", "Female"], placeholder="Select gender"),
]

EVENT_TYPES = (
    "conference",
    "workshop",
    "seminar",
    "retreat",
    "service",
    "outreach",
    "meeting",
    "celebration",
    "training",
    "other",
)
EVENT_STATUSES = ("draft", "published", "cancelled", "completed")


def _terms_field(definition: FormDefinition) -> Optional[CustomField]:
    terms = definition.terms_and_conditions
    if terms is None or not terms.enabled:
        return None
    return CustomField(
        id=TERMS_FIELD_ID,
        label="Terms and conditions",
        type="checkbox",
        required=True,
        help_text=terms.text,
    )


def registration_steps(definition: FormDefinition) -> List[WizardStep]:
    """
    Personal information always comes first. A multi-section form gets one
    step per section; unassigned custom fields and the terms checkbox close the
    last step. Any other layout is a single step.
    """
    personal = tuple(f.id for f in PERSONAL_INFO_FIELDS)
    trailing = tuple(f.id for f in unassigned_fields(definition))
    if _terms_field(definition) is not None:
        trailing += (TERMS_FIELD_ID,)

    if not definition.is_multi_section:
        grouped: tuple = ()
        for section in sorted_sections(definition):
            grouped += tuple(f.id for f in fields_for_section(definition, section.id))
        return [
            WizardStep(
                title="Registration",
                subtitle="Required information for registration",
                fields=personal + grouped + trailing,
            )
        ]

    sections = sorted_sections(definition)
    steps: List[WizardStep] = []
    for index, section in enumerate(sections):
        keys = tuple(f.id for f in fields_for_section(definition, section.id))
        if index == 0:
            keys = personal + keys
        if index == len(sections) - 1:
            keys = keys + trailing
        steps.append(WizardStep(title=section.title, subtitle=section.description or "", fields=keys))
    return steps


def registration_wizard(
    definition: FormDefinition,
    *,
    initial_values: Optional[Mapping[str, Any]] = None,
) -> WizardController:
    log_reference_issues(definition)
    fields: List[CustomField] = list(PERSONAL_INFO_FIELDS) + list(definition.fields)
    terms = _terms_field(definition)
    if terms is not None:
        fields.append(terms)
    return WizardController(registration_steps(definition), fields, initial_values=initial_values)


def committee_collection(member_lookup: Optional[MemberLookup] = None, rows: Optional[list] = None) -> RepeatableCollection:
    options = None
    if member_lookup is not None:
        if not member_lookup.loaded:
            member_lookup.load()
        options = member_lookup.options()
    row_fields = [
        CustomField(id="member", label="Committee member", type="select", required=True, options=options),
        CustomField(id="role", label="Role", type="text", required=True, validation=FieldValidation(max_length=255)),
    ]
    return RepeatableCollection("committee", row_fields, label="Committee", rows=rows)


EVENT_DETAIL_FIELDS: List[CustomField] = [
    CustomField(id="title", label="Title", type="text", required=True, validation=FieldValidation(max_length=255)),
    CustomField(id="description", label="Description", type="textarea", validation=FieldValidation(max_length=5000)),
    CustomField(id="type", label="Event type", type="select", options=list(EVENT_TYPES)),
    CustomField(id="status", label="Status", type="select", options=list(EVENT_STATUSES)),
    CustomField(id="startDate", label="Start date", type="date", required=True),
    CustomField(id="endDate", label="End date", type="date"),
    CustomField(id="startTime", label="Start time", type="time"),
    CustomField(id="endTime", label="End time", type="time"),
    CustomField(id="location.name", label="Venue", type="text"),
    CustomField(id="contactEmail", label="Contact email", type="email"),
    CustomField(id="contactPhone", label="Contact phone", type="phone"),
]

EVENT_REGISTRATION_FIELDS: List[CustomField] = [
    CustomField(
        id="registrationSettings.maxAttendees",
        label="Maximum attendees",
        type="number",
        validation=FieldValidation(min=1),
    ),
    CustomField(id="registrationSettings.deadline", label="Registration deadline", type="date"),
]


def event_wizard(
    *,
    member_lookup: Optional[MemberLookup] = None,
    initial_values: Optional[Mapping[str, Any]] = None,
    committee_rows: Optional[list] = None,
) -> WizardController:
    steps = [
        WizardStep(
            title="Event Details",
            subtitle="Basic info, schedule & location",
            fields=tuple(f.id for f in EVENT_DETAIL_FIELDS) + ("committee",),
        ),
        WizardStep(
            title="Registration",
            subtitle="Form builder & settings",
            fields=tuple(f.id for f in EVENT_REGISTRATION_FIELDS),
        ),
    ]
    defaults = {"type": "other", "status": "draft"}
    defaults.update(dict(initial_values or {}))
    return WizardController(
        steps,
        EVENT_DETAIL_FIELDS + EVENT_REGISTRATION_FIELDS,
        collections=[committee_collection(member_lookup, committee_rows)],
        initial_values=defaults,
    )
