# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskdeck.cli.bootstrap import create_initial_state
from taskdeck.core.state import AppState
from taskdeck.storage.persistent_store import PersistentStore
from taskdeck.storage.substrates import MemorySubstrate
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeRemote


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskdeck-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.sqlite3",
        in_memory_storage=False,
        tasks_key="tasks",
        theme_key="theme",
        api_base_url="https://api.test",
        api_timeout_seconds=None,
        posts_per_page=10,
        search_debounce_ms=10,
        search_debounce_seconds=0.01,
    )


@pytest.fixture()
def substrate() -> MemorySubstrate:
    return MemorySubstrate()


@pytest.fixture()
def store(substrate: MemorySubstrate) -> PersistentStore:
    return PersistentStore(substrate)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def task_store(store: PersistentStore, clock: FakeClock) -> TaskStore:
    return TaskStore(store, clock=clock)


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def state(settings: SimpleNamespace, substrate: MemorySubstrate, remote: FakeRemote) -> AppState:
    """AppState wired with an in-memory substrate and the fake remote resource."""
    return create_initial_state(settings=settings, substrate=substrate, transport=remote.transport())
