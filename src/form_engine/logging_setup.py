from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from form_engine.config import EngineSettings, load_settings

_SENSITIVE_KEYS = {
    "email",
    "phone",
    "password",
    "token",
    "supabase_key",
    "supabase_service_role_key",
}

_HANDLER_NAME = "form_engine"


def redact(value: Any) -> Any:
    """Mask personal data in structures before they are logged."""
    if isinstance(value, dict):
        out: Dict[str, Any] = {}
        for k, v in value.items():
            if str(k).lower() in _SENSITIVE_KEYS:
                out[k] = "***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


class JsonLineFormatter(logging.Formatter):
    """One-line JSON records for easy grepping in server logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            err = record.exc_info[1]
            payload["error"] = {"type": type(err).__name__, "message": str(err)}
        try:
            return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        except Exception:
            return f"{payload['level']} {payload['logger']} {payload['message']}"


def configure_logging(settings: Optional[EngineSettings] = None) -> logging.Logger:
    """
    Attach a stream handler to the `form_engine` logger.

    - `FORM_ENGINE_LOG_LEVEL` sets the level (default INFO)
    - `FORM_ENGINE_LOG_JSON=1` switches to one-line JSON records

    Calling it again replaces the handler instead of stacking another one.
    """
    cfg = settings or load_settings()
    logger = logging.getLogger("form_engine")
    for h in list(logger.handlers):
        if h.get_name() == _HANDLER_NAME:
            logger.removeHandler(h)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if cfg.log_json:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, cfg.log_level, logging.INFO))
    return logger
