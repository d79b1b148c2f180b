# src/taskdeck/tasks/task_store.py

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from ..errors import NotFoundError, ValidationError
from ..storage.persistent_store import PersistentStore
from .task_models import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskFilter,
    TaskStats,
)

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "tasks"

# Smallest step between successive updated_at values (seconds).
_MIN_TICK = 0.001

_EDITABLE_FIELDS = frozenset({"title", "description", "completed"})
_PROTECTED_FIELDS = frozenset({"id", "createdAt", "created_at", "updatedAt", "updated_at"})


def validate_task_input(title: str | None, description: str | None) -> tuple[str, str]:
    """
    Trim and check task text.

    Returns (title, description) trimmed; raises ValidationError otherwise.
    """
    if title is not None and not isinstance(title, str):
        raise ValidationError("title", "Title must be text")
    if description is not None and not isinstance(description, str):
        raise ValidationError("description", "Description must be text")

    title_s = (title or "").strip()
    description_s = (description or "").strip()

    if not title_s:
        raise ValidationError("title", "Title is required")
    if len(title_s) > TITLE_MAX_LENGTH:
        raise ValidationError("title", f"Title must be at most {TITLE_MAX_LENGTH} characters")
    if len(description_s) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            "description", f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return title_s, description_s


class TaskStore:
    """
    Task collection persisted under a single storage key.

    - The collection is newest-first; add() prepends.
    - Every mutation rewrites the whole collection before returning.
    - The in-memory list stays authoritative when the durable write fails.
    - Operations on an unknown id are no-ops (logged), never errors.

    Task objects are immutable snapshots: mutations replace them.
    """

    def __init__(
        self,
        store: PersistentStore,
        *,
        key: str = DEFAULT_TASKS_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if store is None:
            raise ValueError("store is required")
        self._store = store
        self._key = key
        self._clock = clock
        self._tasks: list[Task] = self._load()
        self._last_id_ms = self._max_numeric_id()
        logger.info("TaskStore ready key=%s total=%s", self._key, len(self._tasks))

    # ---- low-level helpers ----

    def _load(self) -> list[Task]:
        raw = self._store.read(self._key, [])
        if not isinstance(raw, list):
            logger.warning("Stored tasks under %r are not a list; starting empty.", self._key)
            return []

        tasks: list[Task] = []
        seen: set[str] = set()
        for item in raw:
            if not isinstance(item, dict):
                logger.warning("Skipping stored task that is not an object: %r", item)
                continue
            try:
                task = Task.from_json(item)
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed stored task: %r", item)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate stored task id=%s", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)
        return tasks

    def _max_numeric_id(self) -> int:
        best = 0
        for t in self._tasks:
            if t.id.isdigit():
                best = max(best, int(t.id))
        return best

    def _next_id(self) -> str:
        # Millisecond clock, bumped past the last issued id so sequential adds never collide.
        now_ms = int(self._clock() * 1000)
        self._last_id_ms = max(now_ms, self._last_id_ms + 1)
        return str(self._last_id_ms)

    def _now(self, not_before: float = 0.0) -> float:
        return max(float(self._clock()), not_before)

    def _touch(self, task: Task) -> float:
        # Strictly after the previous updated_at, even when the clock has not moved.
        return max(self._now(not_before=task.created_at), task.updated_at + _MIN_TICK)

    def _commit(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        self._store.write(self._key, [t.to_json() for t in tasks])

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    def _replace_at(self, index: int, task: Task) -> None:
        tasks = list(self._tasks)
        tasks[index] = task
        self._commit(tasks)

    # ---- read API ----

    def __len__(self) -> int:
        return len(self._tasks)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        try:
            return self._tasks[self._index_of(task_id)]
        except NotFoundError:
            return None

    def filter(self, name: str | TaskFilter = TaskFilter.ALL) -> list[Task]:
        flt = TaskFilter.parse(name)
        if flt == TaskFilter.ACTIVE:
            return [t for t in self._tasks if not t.completed]
        if flt == TaskFilter.COMPLETED:
            return [t for t in self._tasks if t.completed]
        return list(self._tasks)

    def stats(self) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=total, active=total - completed, completed=completed)

    # ---- mutations ----

    def add(self, title: str, description: str | None = "") -> Task:
        title_s, description_s = validate_task_input(title, description)

        now = self._now()
        task = Task(
            id=self._next_id(),
            title=title_s,
            description=description_s,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self._commit([task, *self._tasks])
        logger.debug("Task added id=%s title=%r", task.id, task.title)
        return task

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Task | None:
        """
        Merge editable fields (title, description, completed) onto a task.

        id / createdAt / updatedAt in `fields` are ignored; updated_at is always refreshed.
        Returns the updated task, or None if task_id is unknown.
        """
        try:
            index = self._index_of(task_id)
        except NotFoundError:
            logger.debug("update: no task id=%s", task_id)
            return None

        current = self._tasks[index]
        changes: dict[str, Any] = {}
        for name, value in fields.items():
            if name in _PROTECTED_FIELDS:
                logger.debug("update: ignoring protected field %s for id=%s", name, task_id)
                continue
            if name not in _EDITABLE_FIELDS:
                logger.warning("update: ignoring unknown field %s for id=%s", name, task_id)
                continue
            changes[name] = value

        title, description = validate_task_input(
            changes.get("title", current.title),
            changes.get("description", current.description),
        )
        completed = changes.get("completed", current.completed)
        if not isinstance(completed, bool):
            raise ValidationError("completed", "Completed must be true or false")

        updated = replace(
            current,
            title=title,
            description=description,
            completed=completed,
            updated_at=self._touch(current),
        )
        self._replace_at(index, updated)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def toggle_completion(self, task_id: str) -> Task | None:
        try:
            index = self._index_of(task_id)
        except NotFoundError:
            logger.debug("toggle_completion: no task id=%s", task_id)
            return None

        current = self._tasks[index]
        updated = replace(
            current,
            completed=not current.completed,
            updated_at=self._touch(current),
        )
        self._replace_at(index, updated)
        logger.debug("Task %s -> completed=%s", task_id, updated.completed)
        return updated

    def remove(self, task_id: str) -> bool:
        """Delete a task. Returns False (and changes nothing) if it does not exist."""
        try:
            self._index_of(task_id)
        except NotFoundError:
            logger.debug("remove: no task id=%s", task_id)
            return False

        self._commit([t for t in self._tasks if t.id != task_id])
        logger.debug("Task removed id=%s", task_id)
        return True

    def clear_completed(self) -> int:
        remaining = [t for t in self._tasks if not t.completed]
        removed = len(self._tasks) - len(remaining)
        if removed:
            self._commit(remaining)
            logger.info("Cleared %d completed task(s)", removed)
        return removed
