"""
Explicit add/remove/reorder operations over a form definition.

Every operation returns a new `FormDefinition`; the input snapshot is left
untouched so an editor can keep it for undo or dirty-checking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from form_engine.form_building.factories import create_default_field, create_default_section, new_field_id
from form_engine.schemas.registration_form import CustomField, FormDefinition, FormSection

logger = logging.getLogger(__name__)


def _renumber_fields(fields: Sequence[CustomField]) -> List[CustomField]:
    return [f.model_copy(update={"order": index}) for index, f in enumerate(fields)]


def _renumber_sections(sections: Sequence[FormSection]) -> List[FormSection]:
    return [s.model_copy(update={"order": index}) for index, s in enumerate(sections)]


def sorted_fields(definition: FormDefinition) -> List[CustomField]:
    # sorted() is stable, so equal orders keep their list position.
    return sorted(definition.fields, key=lambda f: f.order)


def sorted_sections(definition: FormDefinition) -> List[FormSection]:
    return sorted(definition.sections, key=lambda s: s.order)


def add_field(definition: FormDefinition, type_: str) -> FormDefinition:
    field = create_default_field(type_, len(definition.fields))
    return definition.model_copy(update={"fields": [*definition.fields, field]})


def update_field(definition: FormDefinition, updated: CustomField) -> FormDefinition:
    fields = [updated if f.id == updated.id else f for f in definition.fields]
    return definition.model_copy(update={"fields": fields})


def remove_field(definition: FormDefinition, field_id: str) -> FormDefinition:
    remaining = [f for f in sorted_fields(definition) if f.id != field_id]
    return definition.model_copy(update={"fields": _renumber_fields(remaining)})


def duplicate_field(definition: FormDefinition, field_id: str) -> FormDefinition:
    source = definition.field_by_id(field_id)
    if source is None:
        return definition
    copy = source.model_copy(
        update={
            "id": new_field_id(),
            "label": f"{source.label} (Copy)",
            "order": len(definition.fields),
        },
        deep=True,
    )
    return definition.model_copy(update={"fields": [*definition.fields, copy]})


def reorder_fields(definition: FormDefinition, ordered_ids: Sequence[str]) -> FormDefinition:
    """
    Assign `order` by position in `ordered_ids`.

    Fields missing from `ordered_ids` follow the listed ones, in their previous order.
    """
    by_id = {f.id: f for f in definition.fields}
    listed: List[CustomField] = []
    seen: set[str] = set()
    for fid in ordered_ids:
        f = by_id.get(fid)
        if f is None or fid in seen:
            continue
        seen.add(fid)
        listed.append(f)
    rest = [f for f in sorted_fields(definition) if f.id not in seen]
    return definition.model_copy(update={"fields": _renumber_fields(listed + rest)})


def add_section(definition: FormDefinition) -> FormDefinition:
    section = create_default_section(len(definition.sections))
    return definition.model_copy(update={"sections": [*definition.sections, section]})


def update_section(definition: FormDefinition, updated: FormSection) -> FormDefinition:
    sections = [updated if s.id == updated.id else s for s in definition.sections]
    return definition.model_copy(update={"sections": sections})


def remove_section(definition: FormDefinition, section_id: str) -> FormDefinition:
    remaining = [s for s in sorted_sections(definition) if s.id != section_id]
    fields = [
        f.model_copy(update={"section_id": None}) if f.section_id == section_id else f
        for f in definition.fields
    ]
    return definition.model_copy(update={"sections": _renumber_sections(remaining), "fields": fields})


def move_section(definition: FormDefinition, from_index: int, to_index: int) -> FormDefinition:
    sections = sorted_sections(definition)
    if not sections:
        return definition
    last = len(sections) - 1
    src = max(0, min(int(from_index), last))
    dst = max(0, min(int(to_index), last))
    if src == dst:
        return definition
    moved = sections.pop(src)
    sections.insert(dst, moved)
    return definition.model_copy(update={"sections": _renumber_sections(sections)})


def fields_for_section(definition: FormDefinition, section_id: Optional[str]) -> List[CustomField]:
    return [f for f in sorted_fields(definition) if f.section_id == section_id]


def unassigned_fields(definition: FormDefinition) -> List[CustomField]:
    """Fields without a section, including those pointing at a section that no longer exists."""
    section_ids = {s.id for s in definition.sections}
    return [f for f in sorted_fields(definition) if not f.section_id or f.section_id not in section_ids]


def rule_source_candidates(definition: FormDefinition, field_id: str) -> List[CustomField]:
    return [f for f in sorted_fields(definition) if f.id != field_id]


@dataclass(frozen=True)
class ReferenceIssue:
    kind: str
    field_id: str
    reference: str

    def describe(self) -> str:
        if self.kind == "duplicate_field_id":
            return f"field id {self.field_id!r} is used more than once"
        if self.kind == "dangling_section":
            return f"field {self.field_id!r} points at missing section {self.reference!r}"
        return f"field {self.field_id!r} has a rule on missing field {self.reference!r}"


def find_reference_issues(definition: FormDefinition) -> List[ReferenceIssue]:
    """Report broken references in a snapshot without raising."""
    issues: List[ReferenceIssue] = []
    section_ids = {s.id for s in definition.sections}
    field_ids: set[str] = set()
    for f in definition.fields:
        if f.id in field_ids:
            issues.append(ReferenceIssue("duplicate_field_id", f.id, f.id))
        field_ids.add(f.id)

    for f in definition.fields:
        if f.section_id and f.section_id not in section_ids:
            issues.append(ReferenceIssue("dangling_section", f.id, f.section_id))
        logic = f.conditional_logic
        if logic is None:
            continue
        for rule in logic.rules:
            if rule.field_id not in field_ids:
                issues.append(ReferenceIssue("dangling_rule", f.id, rule.field_id))
    return issues


def log_reference_issues(definition: FormDefinition) -> List[ReferenceIssue]:
    issues = find_reference_issues(definition)
    for issue in issues:
        logger.warning("form definition: %s", issue.describe())
    return issues
