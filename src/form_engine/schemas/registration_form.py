"""
Registration form schema models.

These classes mirror the persisted `registrationSettings` contract of the events
service (camelCase on the wire, snake_case in Python) and are what the builder,
the conditional evaluator and the wizard all consume.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

FieldType = Literal[
    "text",
    "textarea",
    "select",
    "checkbox",
    "radio",
    "email",
    "phone",
    "number",
    "date",
    "time",
    "rating",
    "multi-checkbox",
]

ConditionalOperator = Literal[
    "equals",
    "not_equals",
    "contains",
    "not_contains",
    "greater_than",
    "less_than",
    "is_empty",
    "is_not_empty",
]

LogicAction = Literal["show", "hide"]
LogicType = Literal["all", "any"]

FormLayout = Literal["single-page", "multi-section"]
FormStatus = Literal["draft", "live"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FieldValidation(_CamelModel):
    min_length: Optional[int] = Field(None, alias="minLength")
    max_length: Optional[int] = Field(None, alias="maxLength")
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None
    pattern: Optional[str] = Field(None, description="Regular expression source")
    pattern_message: Optional[str] = Field(None, alias="patternMessage")


class ConditionalRule(_CamelModel):
    field_id: str = Field(..., alias="fieldId", description="Id of the field whose value is tested")
    operator: str = Field(..., description="One of ConditionalOperator; unknown operators evaluate false")
    value: Optional[Union[str, int, float]] = Field(None, description="Comparand; unused by the emptiness checks")


class ConditionalLogic(_CamelModel):
    enabled: bool = False
    action: str = Field("show", description="One of LogicAction")
    logic_type: str = Field("all", alias="logicType", description="One of LogicType")
    rules: List[ConditionalRule] = Field(default_factory=list)


class CustomField(_CamelModel):
    """
    One configurable input of a registration form.

    `type` is kept as a plain string so snapshots written by a newer builder
    still load; unknown types simply miss the field catalog.
    """

    id: str = Field(..., description="Stable id, unique within a form definition")
    label: str
    type: str = Field(..., description="One of FieldType")
    required: bool = False
    options: Optional[List[str]] = None
    placeholder: Optional[str] = None
    help_text: Optional[str] = Field(None, alias="helpText")
    description: Optional[str] = None
    order: int = 0
    section_id: Optional[str] = Field(None, alias="sectionId")
    validation: Optional[FieldValidation] = None
    conditional_logic: Optional[ConditionalLogic] = Field(None, alias="conditionalLogic")


class FormSection(_CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    order: int = 0
    collapsible: bool = False
    default_expanded: bool = Field(True, alias="defaultExpanded")


class FormHeader(_CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, alias="logoUrl")


class TermsAndConditions(_CamelModel):
    enabled: bool = False
    text: Optional[str] = None
    link_url: Optional[str] = Field(None, alias="linkUrl")


class FormDefinition(_CamelModel):
    """
    Complete snapshot of a registration form: sections, fields and layout.

    The engine never patches a definition in place; builder operations return
    a new snapshot.
    """

    sections: List[FormSection] = Field(default_factory=list)
    fields: List[CustomField] = Field(default_factory=list)
    form_layout: FormLayout = Field("single-page", alias="formLayout")
    form_header: Optional[FormHeader] = Field(None, alias="formHeader")
    terms_and_conditions: Optional[TermsAndConditions] = Field(None, alias="termsAndConditions")
    form_status: FormStatus = Field("draft", alias="formStatus")

    @classmethod
    def from_registration_settings(cls, settings: Optional[Dict[str, Any]]) -> "FormDefinition":
        """Build a definition from an event's persisted `registrationSettings` object."""
        raw = settings if isinstance(settings, dict) else {}
        payload: Dict[str, Any] = {
            "sections": raw.get("formSections") or [],
            "fields": raw.get("customFields") or [],
            "formLayout": raw.get("formLayout") or "single-page",
            "formStatus": raw.get("formStatus") or "draft",
        }
        if isinstance(raw.get("formHeader"), dict):
            payload["formHeader"] = raw["formHeader"]
        if isinstance(raw.get("termsAndConditions"), dict):
            payload["termsAndConditions"] = raw["termsAndConditions"]
        return cls.model_validate(payload)

    def to_registration_settings(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "customFields": [f.model_dump(by_alias=True, exclude_none=True) for f in self.fields],
            "formSections": [s.model_dump(by_alias=True, exclude_none=True) for s in self.sections],
            "formLayout": self.form_layout,
            "formStatus": self.form_status,
        }
        if self.form_header is not None:
            out["formHeader"] = self.form_header.model_dump(by_alias=True, exclude_none=True)
        if self.terms_and_conditions is not None:
            out["termsAndConditions"] = self.terms_and_conditions.model_dump(by_alias=True, exclude_none=True)
        return out

    @property
    def is_multi_section(self) -> bool:
        return self.form_layout == "multi-section" and len(self.sections) > 0

    def field_by_id(self, field_id: str) -> Optional[CustomField]:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def section_by_id(self, section_id: str) -> Optional[FormSection]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None
