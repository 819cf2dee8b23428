from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    storage_dir: Path
    session_key: str
    http_timeout_s: float
    watch_storage: bool
    log_level: str


def load_settings() -> Settings:
    api_base_url = os.environ.get("NOTEKEEP_API_BASE_URL", "http://localhost:8080")
    storage_dir = Path(os.environ.get("NOTEKEEP_STORAGE_DIR", "./.notekeep")).resolve()
    session_key = os.environ.get("NOTEKEEP_SESSION_KEY", "user")
    http_timeout_s = float(os.environ.get("NOTEKEEP_HTTP_TIMEOUT_S", "30"))
    watch_storage = os.environ.get("NOTEKEEP_WATCH_STORAGE", "true").lower() == "true"
    log_level = os.environ.get("NOTEKEEP_LOG_LEVEL", "INFO")
    return Settings(
        api_base_url=api_base_url,
        storage_dir=storage_dir,
        session_key=session_key,
        http_timeout_s=http_timeout_s,
        watch_storage=watch_storage,
        log_level=log_level,
    )
