from __future__ import annotations

import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from form_engine.logic.conditional import visible_fields
from form_engine.logic.validation_rules import FieldError, ValidationResult, validate_fields
from form_engine.schemas.registration_form import CustomField


class CollectionRow(BaseModel):
    row_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    values: Dict[str, Any] = Field(default_factory=dict)


class RepeatableCollection:
    """
    Ordered rows nested under one logical field key (e.g. `committee`).

    Rows are addressed by `row_id`, never by index, so adding or removing a row
    leaves the identity, order and values of its siblings alone. Validation
    errors are keyed `<key>.<row_id>.<field id>` for the same reason.
    """

    def __init__(
        self,
        key: str,
        row_fields: Sequence[CustomField],
        *,
        label: Optional[str] = None,
        min_rows: int = 0,
        rows: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> None:
        self.key = key
        self.label = label or key
        self.row_fields: List[CustomField] = list(row_fields)
        self.min_rows = max(0, int(min_rows))
        self._rows: List[CollectionRow] = []
        for values in rows or []:
            self.add_row(values)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[CollectionRow]:
        return [r.model_copy(deep=True) for r in self._rows]

    @property
    def row_ids(self) -> List[str]:
        return [r.row_id for r in self._rows]

    def blank_row(self) -> Dict[str, Any]:
        return {f.id: None for f in self.row_fields}

    def add_row(self, values: Optional[Mapping[str, Any]] = None) -> CollectionRow:
        data = self.blank_row()
        data.update(dict(values or {}))
        row = CollectionRow(values=data)
        self._rows.append(row)
        return row.model_copy(deep=True)

    def row(self, row_id: str) -> Optional[CollectionRow]:
        for r in self._rows:
            if r.row_id == row_id:
                return r.model_copy(deep=True)
        return None

    def update_row(self, row_id: str, **values: Any) -> bool:
        for r in self._rows:
            if r.row_id == row_id:
                r.values.update(values)
                return True
        return False

    def remove_row(self, row_id: str) -> bool:
        for index, r in enumerate(self._rows):
            if r.row_id == row_id:
                del self._rows[index]
                return True
        return False

    def error_key(self, row_id: str, field_id: str) -> str:
        return f"{self.key}.{row_id}.{field_id}"

    def validate(self) -> ValidationResult:
        result = ValidationResult(checked=[self.key])
        if len(self._rows) < self.min_rows:
            noun = "entry" if self.min_rows == 1 else "entries"
            result.errors[self.key] = FieldError(
                field_id=self.key,
                rule="min_rows",
                message=f"{self.label} needs at least {self.min_rows} {noun}",
            )
        for r in self._rows:
            shown = visible_fields(self.row_fields, r.values, self.row_fields)
            result = result.merge(validate_fields(shown, r.values, key_prefix=f"{self.key}.{r.row_id}."))
        return result

    def to_payload(self) -> List[Dict[str, Any]]:
        field_ids = {f.id for f in self.row_fields}
        out: List[Dict[str, Any]] = []
        for r in self._rows:
            shown = {f.id for f in visible_fields(self.row_fields, r.values, self.row_fields)}
            hidden = field_ids - shown
            out.append({k: v for k, v in r.values.items() if k not in hidden})
        return out
