"""
Environment-driven settings.

`.env` and `.env.local` at the repository root are loaded when present
(local dev convenience); real environment variables always win.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _repo_root() -> Path:
    # `src/form_engine/config.py` lives two levels below the repo root.
    return Path(__file__).resolve().parents[2]


def _env_str(*names: str, default: str = "") -> str:
    for name in names:
        v = (os.getenv(name) or "").strip()
        if v:
            return v
    return default


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class EngineSettings(BaseModel):
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = Field(None, repr=False)
    events_table: str = "events"
    registrations_table: str = "event_registrations"
    members_table: str = "members"
    member_page_size: int = Field(100, ge=1)
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def load_settings(*, load_env_files: bool = True) -> EngineSettings:
    if load_env_files:
        load_dotenv(_repo_root() / ".env", override=False)
        load_dotenv(_repo_root() / ".env.local", override=False)

    return EngineSettings(
        # NEXT_PUBLIC_* names are shared with the admin frontend's env files.
        supabase_url=_env_str("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL") or None,
        supabase_key=_env_str("SUPABASE_SERVICE_ROLE_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY") or None,
        events_table=_env_str("FORM_ENGINE_EVENTS_TABLE", default="events"),
        registrations_table=_env_str("FORM_ENGINE_REGISTRATIONS_TABLE", default="event_registrations"),
        members_table=_env_str("FORM_ENGINE_MEMBERS_TABLE", default="members"),
        member_page_size=max(1, _env_int("FORM_ENGINE_MEMBER_PAGE_SIZE", 100)),
        log_level=_env_str("FORM_ENGINE_LOG_LEVEL", default="INFO").upper(),
        log_json=_env_bool("FORM_ENGINE_LOG_JSON", False),
    )
