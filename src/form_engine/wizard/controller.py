"""
Multi-step wizard over a fixed partition of field keys.

The controller owns the live value set for one session. Each step declares
the keys it owns (custom field ids, predefined top-level keys, dotted keys for
nested values, or the key of a repeatable collection); within a step, fields
hidden by conditional logic are neither validated nor submitted.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from form_engine.errors import WizardStateError
from form_engine.logic.conditional import evaluate_conditional_logic
from form_engine.logic.validation_rules import FieldError, ValidationResult, validate_fields
from form_engine.logic.values import get_path, pop_path, set_path
from form_engine.schemas.registration_form import CustomField
from form_engine.storage.contracts import SubmissionSink
from form_engine.wizard.collections import RepeatableCollection
from form_engine.wizard.transforms import DEFAULT_TRANSFORMS, Transform, apply_transforms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardStep:
    title: str
    fields: Tuple[str, ...] = field(default_factory=tuple)
    subtitle: str = ""


class SubmissionOutcome(BaseModel):
    ok: bool
    payload: Dict[str, Any] = Field(default_factory=dict)
    response: Any = None
    errors: Dict[str, FieldError] = Field(default_factory=dict)
    failed_step: Optional[int] = None


class WizardController:
    def __init__(
        self,
        steps: Sequence[WizardStep],
        fields: Iterable[CustomField],
        *,
        collections: Optional[Iterable[RepeatableCollection]] = None,
        initial_values: Optional[Mapping[str, Any]] = None,
        transforms: Sequence[Transform] = DEFAULT_TRANSFORMS,
    ) -> None:
        if not steps:
            raise WizardStateError("a wizard needs at least one step")
        self._steps: List[WizardStep] = list(steps)
        self._fields: Dict[str, CustomField] = {}
        for f in fields:
            self._fields.setdefault(f.id, f)
        self._collections: Dict[str, RepeatableCollection] = {c.key: c for c in collections or []}
        self._values: Dict[str, Any] = copy.deepcopy(dict(initial_values or {}))
        self._transforms = tuple(transforms)
        self._current = 1
        self._errors: Dict[int, Dict[str, FieldError]] = {}
        self._completed: set[int] = set()
        self._submitting = False

    # -- state -----------------------------------------------------------------

    @property
    def current_step(self) -> int:
        return self._current

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def is_first_step(self) -> bool:
        return self._current == 1

    @property
    def is_last_step(self) -> bool:
        return self._current == self.total_steps

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def completed_steps(self) -> List[int]:
        return sorted(self._completed)

    @property
    def progress(self) -> int:
        return round(self._current / self.total_steps * 100)

    @property
    def fields(self) -> List[CustomField]:
        return list(self._fields.values())

    def step(self, number: Optional[int] = None) -> WizardStep:
        return self._steps[self._clamp(self._current if number is None else number) - 1]

    def _clamp(self, number: int) -> int:
        return max(1, min(int(number), self.total_steps))

    # -- values ------------------------------------------------------------------

    @property
    def values(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def get_value(self, key: str) -> Any:
        return get_path(self._values, key)

    def set_value(self, key: str, value: Any) -> None:
        if key in self._collections:
            raise WizardStateError(f"{key!r} is a repeatable collection; edit it through collection()")
        self._values[key] = value

    def update_values(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self.set_value(key, value)

    def collection(self, key: str) -> RepeatableCollection:
        return self._collections[key]

    # -- visibility & validation -------------------------------------------------

    def is_visible(self, field_id: str) -> bool:
        f = self._fields.get(field_id)
        if f is None:
            return True
        return evaluate_conditional_logic(f, self._values, self._fields.values())

    def visible_fields(self, step_number: Optional[int] = None) -> List[CustomField]:
        out: List[CustomField] = []
        for key in self.step(step_number).fields:
            f = self._fields.get(key)
            if f is not None and self.is_visible(key):
                out.append(f)
        return out

    def step_collections(self, step_number: Optional[int] = None) -> List[RepeatableCollection]:
        return [self._collections[k] for k in self.step(step_number).fields if k in self._collections]

    def validate_step(self, step_number: Optional[int] = None) -> ValidationResult:
        number = self._clamp(self._current if step_number is None else step_number)
        result = validate_fields(self.visible_fields(number), self._values)
        for collection in self.step_collections(number):
            result = result.merge(collection.validate())
        self._errors[number] = dict(result.errors)
        return result

    def errors(self, step_number: Optional[int] = None) -> Dict[str, FieldError]:
        if step_number is None:
            merged: Dict[str, FieldError] = {}
            for errs in self._errors.values():
                merged.update(errs)
            return merged
        return dict(self._errors.get(self._clamp(step_number), {}))

    def error_count_for_step(self, step_number: int) -> int:
        return len(self._errors.get(self._clamp(step_number), {}))

    # -- navigation --------------------------------------------------------------

    def next(self) -> ValidationResult:
        result = self.validate_step(self._current)
        if not result.is_valid:
            logger.debug("step %d blocked by %d error(s)", self._current, len(result.errors))
            return result
        self._completed.add(self._current)
        if self._current < self.total_steps:
            self._current += 1
            logger.debug("advanced to step %d", self._current)
        return result

    def previous(self) -> None:
        if self._current > 1:
            self._current -= 1

    def go_to(self, step_number: int) -> None:
        """Jump straight to a step; intermediate steps are not re-validated."""
        self._current = self._clamp(step_number)

    def step_summaries(self) -> List[Dict[str, Any]]:
        return [
            {
                "number": n,
                "title": s.title,
                "subtitle": s.subtitle,
                "active": n == self._current,
                "completed": n in self._completed,
                "errorCount": self.error_count_for_step(n),
            }
            for n, s in enumerate(self._steps, start=1)
        ]

    # -- submission ----------------------------------------------------------------

    def build_submission(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        # Plain keys first so a dotted key can refine an initial nested value.
        for key, value in sorted(self._values.items(), key=lambda kv: "." in kv[0]):
            set_path(payload, key, copy.deepcopy(value))
        for fid in self._fields:
            if not self.is_visible(fid):
                pop_path(payload, fid)
        for key, collection in self._collections.items():
            payload[key] = collection.to_payload()
        return apply_transforms(payload, self._fields, self._transforms)

    async def submit(self, sink: SubmissionSink) -> SubmissionOutcome:
        """
        Validate every step and hand the assembled payload to `sink`.

        If any step fails, the wizard moves to the first failing step and the
        sink is not called. Errors raised by the sink propagate unchanged.
        """
        if not self.is_last_step:
            raise WizardStateError("submit is only available on the last step")
        if self._submitting:
            raise WizardStateError("a submission is already in flight")

        combined = ValidationResult()
        first_failed: Optional[int] = None
        for number in range(1, self.total_steps + 1):
            result = self.validate_step(number)
            if not result.is_valid and first_failed is None:
                first_failed = number
            combined = combined.merge(result)

        if first_failed is not None:
            self._current = first_failed
            return SubmissionOutcome(ok=False, errors=combined.errors, failed_step=first_failed)

        payload = self.build_submission()
        self._submitting = True
        try:
            response = await sink.submit(payload)
        finally:
            self._submitting = False
        logger.info("submitted wizard payload with %d key(s)", len(payload))
        return SubmissionOutcome(ok=True, payload=payload, response=response)
