from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import streamlit as st

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "COLLECTION_TRACKER_DATA_DIR"
ENV_ADMIN_EMAIL = "COLLECTION_TRACKER_ADMIN_EMAIL"
ENV_TELEGRAM_TOKEN = "COLLECTION_TRACKER_TELEGRAM_TOKEN"
ENV_TELEGRAM_CHAT_ID = "COLLECTION_TRACKER_TELEGRAM_CHAT_ID"
ENV_LOG_LEVEL = "COLLECTION_TRACKER_LOG_LEVEL"

DEFAULT_ADMIN_EMAIL = "admin@card.com"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    admin_email: str = DEFAULT_ADMIN_EMAIL
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    notify_timeout: float = 10.0
    log_level: str = "INFO"

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


def _default_data_dir() -> Path:
    # Not a hard-coded absolute path: uses the user's home directory.
    return Path.home() / ".collection_tracker"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            data = json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", cfg)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: expected a JSON object", cfg)
            return {}
        return data
    return {}


def persist_settings(
    data_dir_str: str,
    *,
    telegram_bot_token: Optional[str] = None,
    telegram_chat_id: Optional[str] = None,
) -> None:
    data_dir = Path(data_dir_str).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = _load_persisted_settings(data_dir)
    payload["data_dir"] = str(data_dir)
    if telegram_bot_token is not None:
        payload["telegram_bot_token"] = telegram_bot_token.strip()
    if telegram_chat_id is not None:
        payload["telegram_chat_id"] = telegram_chat_id.strip()
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Also point the default folder at the new location so a fresh session finds it
    default_dir = _default_data_dir()
    if default_dir != data_dir:
        default_dir.mkdir(parents=True, exist_ok=True)
        pointer = _load_persisted_settings(default_dir)
        pointer["data_dir"] = str(data_dir)
        (default_dir / CONFIG_FILE_NAME).write_text(json.dumps(pointer, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state["collection_tracker_data_dir"] = str(data_dir)


def resolve_settings(session: Optional[dict] = None, environ: Optional[dict] = None) -> Settings:
    # Data directory priority:
    # 1) Session state (set via Data Management page)
    # 2) Environment variable
    # 3) Persisted settings in default folder
    # 4) Default folder
    # Telegram credentials: environment first, then the data directory's settings file.
    session = {} if session is None else session
    environ = os.environ if environ is None else environ

    if "collection_tracker_data_dir" in session:
        data_dir = Path(session["collection_tracker_data_dir"]).expanduser().resolve()
    elif environ.get(ENV_DATA_DIR):
        data_dir = Path(environ.get(ENV_DATA_DIR, "")).expanduser().resolve()
    else:
        default_dir = _default_data_dir()
        persisted = _load_persisted_settings(default_dir)
        data_dir = Path(persisted.get("data_dir", default_dir)).expanduser().resolve()

    data_dir.mkdir(parents=True, exist_ok=True)
    persisted = _load_persisted_settings(data_dir)

    admin_email = (environ.get(ENV_ADMIN_EMAIL) or persisted.get("admin_email") or DEFAULT_ADMIN_EMAIL)
    token = environ.get(ENV_TELEGRAM_TOKEN) or persisted.get("telegram_bot_token") or None
    chat_id = environ.get(ENV_TELEGRAM_CHAT_ID) or persisted.get("telegram_chat_id") or None
    log_level = environ.get(ENV_LOG_LEVEL) or persisted.get("log_level") or "INFO"

    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "app.db",
        admin_email=str(admin_email).strip().lower(),
        telegram_bot_token=token,
        telegram_chat_id=str(chat_id) if chat_id is not None else None,
        log_level=str(log_level).upper(),
    )


@st.cache_resource
def get_settings() -> Settings:
    return resolve_settings(dict(st.session_state))
