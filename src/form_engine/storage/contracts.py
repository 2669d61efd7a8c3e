from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from form_engine.schemas.registration_form import FormDefinition


class SubmissionSink(Protocol):
    """Receives a completed wizard payload. Failures are raised and reach the caller as-is."""

    async def submit(self, payload: Dict[str, Any]) -> Any: ...


class FormDefinitionSource(Protocol):
    async def fetch_form_definition(self, event_id: str) -> Optional[FormDefinition]: ...
