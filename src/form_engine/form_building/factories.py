from __future__ import annotations

import uuid

from form_engine.form_building.catalog import DEFAULT_OPTIONS, field_type_label, get_field_type_config
from form_engine.schemas.registration_form import ConditionalLogic, CustomField, FormSection


def new_field_id() -> str:
    return f"field-{uuid.uuid4().hex}"


def new_section_id() -> str:
    return f"section-{uuid.uuid4().hex}"


def create_default_field(type_: str, order: int) -> CustomField:
    """
    New field of `type_` with catalog defaults and inert conditional logic.

    The id is minted once here; builder operations must never regenerate it,
    since conditional rules elsewhere in the form reference it.
    """
    config = get_field_type_config(type_)
    return CustomField(
        id=new_field_id(),
        label=field_type_label(type_),
        type=str(type_),
        required=False,
        order=order,
        options=list(DEFAULT_OPTIONS) if config is not None and config.has_options else None,
        validation=config.build_default_validation() if config is not None else None,
        conditional_logic=ConditionalLogic(enabled=False, action="show", logic_type="all", rules=[]),
    )


def create_default_section(order: int) -> FormSection:
    return FormSection(
        id=new_section_id(),
        title=f"Section {order + 1}",
        order=order,
        collapsible=False,
        default_expanded=True,
    )
