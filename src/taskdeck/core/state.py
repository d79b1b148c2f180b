# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from ..remote.posts import PostsAggregator
from ..storage.persistent_store import PersistentStore
from ..storage.theme import ThemePreference
from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TaskStore
from ..views.search_controller import SearchController


@dataclass
class AppState:
    """
    Everything a front end needs, wired once by the bootstrap.

    Collaborators are required: passing None fails here, at construction,
    rather than on first use.
    """

    settings: Any
    store: PersistentStore
    tasks: TaskStore
    theme: ThemePreference
    posts: PostsAggregator
    search: SearchController

    # Front-end view state (not persisted)
    task_filter: TaskFilter = TaskFilter.ALL

    def __post_init__(self) -> None:
        missing = [f.name for f in fields(self) if getattr(self, f.name) is None]
        if missing:
            raise ValueError(f"AppState is missing required collaborators: {', '.join(missing)}")
