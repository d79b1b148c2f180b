# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.core.state import AppState
from taskdeck.storage.substrates import SqliteSubstrate


def test_bootstrap_uses_sqlite_by_default(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    state.tasks.add("persist me")
    state.theme.set(True)

    assert settings.storage_path.exists()
    again = create_initial_state(settings=settings)
    assert [t.title for t in again.tasks.all_tasks()] == ["persist me"]
    assert again.theme.dark_mode is True
    assert again.search.page_size == settings.posts_per_page


def test_bootstrap_in_memory_storage(settings: SimpleNamespace) -> None:
    settings.in_memory_storage = True
    state = create_initial_state(settings=settings)
    state.tasks.add("ephemeral")

    assert not settings.storage_path.exists()
    assert create_initial_state(settings=settings).tasks.all_tasks() == []


def test_app_state_rejects_missing_collaborators(state: AppState, settings: SimpleNamespace) -> None:
    with pytest.raises(ValueError, match="tasks"):
        AppState(
            settings=settings,
            store=state.store,
            tasks=None,  # type: ignore[arg-type]
            theme=state.theme,
            posts=state.posts,
            search=state.search,
        )


def test_sqlite_substrate_creates_parent_dirs(tmp_path) -> None:
    sub = SqliteSubstrate(tmp_path / "nested" / "dir" / "kv.sqlite3")
    sub.set_item("k", "v")
    assert sub.get_item("k") == "v"
