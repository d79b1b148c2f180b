# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (storage, tasks, theme, remote, search).
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_settings
from ..core.ports import KeyValueSubstrate
from ..core.state import AppState
from ..remote.api_client import ApiClient
from ..remote.posts import PostsAggregator
from ..storage.persistent_store import PersistentStore
from ..storage.substrates import MemorySubstrate, SqliteSubstrate
from ..storage.theme import ThemePreference
from ..tasks.task_store import TaskStore
from ..views.search_controller import SearchController

logger = logging.getLogger(__name__)


def _make_substrate(settings) -> KeyValueSubstrate:
    if getattr(settings, "in_memory_storage", False):
        logger.info("Using in-memory storage (nothing is written to disk).")
        return MemorySubstrate()
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)
    return SqliteSubstrate(settings.storage_path)


def create_initial_state(
    *,
    settings=None,
    substrate: KeyValueSubstrate | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). substrate/transport override the
    storage backend and HTTP transport (tests).
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    store = PersistentStore(substrate if substrate is not None else _make_substrate(settings))

    client = ApiClient(
        settings.api_base_url,
        timeout_seconds=settings.api_timeout_seconds,
        transport=transport,
    )
    posts = PostsAggregator(client)

    return AppState(
        settings=settings,
        store=store,
        tasks=TaskStore(store, key=settings.tasks_key),
        theme=ThemePreference(store, key=settings.theme_key),
        posts=posts,
        search=SearchController(
            posts,
            page_size=settings.posts_per_page,
            debounce_seconds=settings.search_debounce_seconds,
        ),
    )
