"""
Supabase adapters for the engine's external collaborators.

The engine only needs three things from storage: an event's form definition,
a place to put a completed registration, and a paginated member list for
committee rows. Everything else about the events tables belongs to the
surrounding application.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from supabase import Client, create_client

from form_engine.config import EngineSettings, load_settings
from form_engine.errors import StorageError
from form_engine.form_building.builder import log_reference_issues
from form_engine.logging_setup import redact
from form_engine.schemas.registration_form import FormDefinition
from form_engine.wizard.lookup import MemberOption, MemberPage

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase_client(settings: Optional[EngineSettings] = None) -> Optional[Client]:
    """Get or create the Supabase client (singleton). None when credentials are missing."""
    global _client

    if _client is not None:
        return _client

    cfg = settings or load_settings()
    if not cfg.supabase_configured:
        return None

    _client = create_client(cfg.supabase_url, cfg.supabase_key)
    return _client


def reset_supabase_client() -> None:
    global _client
    _client = None


def _require_client(client: Optional[Client], settings: Optional[EngineSettings]) -> Any:
    resolved = client if client is not None else get_supabase_client(settings)
    if resolved is None:
        raise StorageError("Supabase is not configured (set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)")
    return resolved


async def fetch_form_definition(
    event_id: str,
    *,
    client: Optional[Client] = None,
    settings: Optional[EngineSettings] = None,
) -> Optional[FormDefinition]:
    """
    Load an event's registration form snapshot.

    Returns None when the event does not exist. Broken references inside the
    snapshot are logged, not rejected.
    """
    cfg = settings or load_settings()
    db = _require_client(client, cfg)
    if not event_id:
        return None

    result = (
        db.table(cfg.events_table)
        .select("id, registration_settings")
        .eq("id", event_id)
        .limit(1)
        .execute()
    )
    rows = result.data or []
    if not rows:
        return None
    row = rows[0] if isinstance(rows[0], dict) else {}
    definition = FormDefinition.from_registration_settings(row.get("registration_settings"))
    log_reference_issues(definition)
    return definition


class SupabaseSubmissionSink:
    """Inserts a completed registration into the registrations table."""

    def __init__(
        self,
        event_id: str,
        *,
        client: Optional[Client] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.event_id = event_id
        self._settings = settings or load_settings()
        self._client = client

    async def submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        db = _require_client(self._client, self._settings)
        logger.debug("inserting registration for event %s: %s", self.event_id, redact(payload))
        result = (
            db.table(self._settings.registrations_table)
            .insert({"event_id": self.event_id, "responses": payload})
            .execute()
        )
        rows = result.data or []
        if not rows:
            raise StorageError(f"registration insert for event {self.event_id} returned no rows")
        return rows[0]


class SupabaseMemberSource:
    """Pages through the members table for committee selects."""

    def __init__(self, *, client: Optional[Client] = None, settings: Optional[EngineSettings] = None) -> None:
        self._settings = settings or load_settings()
        self._client = client

    def fetch_page(self, page: int, limit: int) -> MemberPage:
        db = _require_client(self._client, self._settings)
        start = max(0, (int(page) - 1) * int(limit))
        result = (
            db.table(self._settings.members_table)
            .select("id, first_name, last_name", count="exact")
            .order("last_name")
            .range(start, start + int(limit) - 1)
            .execute()
        )
        items = []
        for row in result.data or []:
            if not isinstance(row, dict) or row.get("id") is None:
                continue
            name = " ".join(str(row.get(k) or "").strip() for k in ("first_name", "last_name")).strip()
            items.append(MemberOption(id=str(row["id"]), name=name or str(row["id"])))
        return MemberPage(items=items, total=getattr(result, "count", None))
