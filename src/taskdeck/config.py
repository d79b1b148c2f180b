# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Malformed values fall back to defaults instead of failing at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local storage ----
    data_dir: Path
    storage_path: Path
    in_memory_storage: bool
    tasks_key: str
    theme_key: str

    # ---- Remote resource ----
    api_base_url: str
    api_timeout_seconds: float | None

    # ---- Posts view ----
    posts_per_page: int
    search_debounce_ms: int

    @property
    def search_debounce_seconds(self) -> float:
        return max(0, self.search_debounce_ms) / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck").strip() or "taskdeck"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.sqlite3")
        in_memory_storage = _env_bool(_k("IN_MEMORY_STORAGE"), False)
        tasks_key = _env(_k("TASKS_KEY"), "tasks").strip() or "tasks"
        theme_key = _env(_k("THEME_KEY"), "theme").strip() or "theme"

        api_base_url = _env(_k("API_BASE_URL"), "https://jsonplaceholder.typicode.com").strip()
        api_timeout_seconds = _env_float(_k("API_TIMEOUT_SECONDS"), None)

        posts_per_page = max(1, _env_int(_k("POSTS_PER_PAGE"), 9))
        search_debounce_ms = max(0, _env_int(_k("SEARCH_DEBOUNCE_MS"), 500))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            in_memory_storage=in_memory_storage,
            tasks_key=tasks_key,
            theme_key=theme_key,
            api_base_url=api_base_url,
            api_timeout_seconds=api_timeout_seconds,
            posts_per_page=posts_per_page,
            search_debounce_ms=search_debounce_ms,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Load .env (without overriding the real environment) and build Settings once."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
