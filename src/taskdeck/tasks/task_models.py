# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | TaskFilter) -> TaskFilter:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown task filter: {raw!r} (expected all, active or completed)") from None


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    description: str
    completed: bool
    created_at: float
    updated_at: float

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Task:
        """
        Build a Task from its stored form.

        Raises KeyError / TypeError / ValueError on entries that cannot be a task.
        """
        task_id = data["id"]
        if task_id is None or str(task_id) == "":
            raise ValueError("task id is empty")
        created_at = float(data.get("createdAt") or 0.0)
        updated_at = float(data.get("updatedAt") or created_at)
        return cls(
            id=str(task_id),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            completed=bool(data.get("completed", False)),
            created_at=created_at,
            updated_at=max(updated_at, created_at),
        )


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    active: int
    completed: int

    @property
    def completion_percentage(self) -> int:
        if self.total == 0:
            return 0
        return round(self.completed / self.total * 100)
