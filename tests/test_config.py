# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from taskdeck.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("TASKDECK_"):
            monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "taskdeck"
    assert s.data_dir == Path(".local/taskdeck")
    assert s.storage_path == Path(".local/taskdeck") / "storage.sqlite3"
    assert s.api_base_url == "https://jsonplaceholder.typicode.com"
    assert s.api_timeout_seconds is None
    assert s.posts_per_page == 9
    assert s.search_debounce_ms == 500
    assert s.search_debounce_seconds == 0.5
    assert s.tasks_key == "tasks"
    assert s.theme_key == "theme"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDECK_POSTS_PER_PAGE", "12")
    monkeypatch.setenv("TASKDECK_SEARCH_DEBOUNCE_MS", "250")
    monkeypatch.setenv("TASKDECK_API_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("TASKDECK_IN_MEMORY_STORAGE", "yes")

    s = Settings.from_env()
    assert s.storage_path == tmp_path / "storage.sqlite3"
    assert s.posts_per_page == 12
    assert s.search_debounce_seconds == 0.25
    assert s.api_timeout_seconds == 7.5
    assert s.in_memory_storage is True


def test_malformed_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKDECK_POSTS_PER_PAGE", "many")
    monkeypatch.setenv("TASKDECK_API_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("TASKDECK_SEARCH_DEBOUNCE_MS", "-5")

    s = Settings.from_env()
    assert s.posts_per_page == 9
    assert s.api_timeout_seconds is None
    assert s.search_debounce_ms == 0
