# tests/test_task_store.py

from __future__ import annotations

import pytest

from taskdeck.errors import ValidationError
from taskdeck.storage.persistent_store import PersistentStore
from taskdeck.storage.substrates import MemorySubstrate
from taskdeck.tasks.task_models import TaskFilter
from taskdeck.tasks.task_store import TaskStore

from .fakes import FakeClock


def _stored_ids(store: PersistentStore) -> list[str]:
    return [t["id"] for t in store.read("tasks", [])]


def test_add_toggle_clear_scenario(task_store: TaskStore, clock: FakeClock, store: PersistentStore) -> None:
    task = task_store.add("Buy milk", "")
    assert len(task_store) == 1
    assert task.completed is False
    assert _stored_ids(store) == [task.id]

    clock.advance(5)
    toggled = task_store.toggle_completion(task.id)
    assert toggled is not None
    assert toggled.completed is True
    assert toggled.updated_at != task.updated_at
    assert toggled.created_at == task.created_at

    assert task_store.clear_completed() == 1
    assert task_store.all_tasks() == []
    assert store.read("tasks") == []


def test_add_trims_and_sets_timestamps(task_store: TaskStore) -> None:
    task = task_store.add("  Write report  ", "  by friday ")
    assert task.title == "Write report"
    assert task.description == "by friday"
    assert task.created_at == task.updated_at


@pytest.mark.parametrize(
    ("title", "description", "field"),
    [
        ("", "", "title"),
        ("   ", "", "title"),
        ("x" * 101, "", "title"),
        ("ok", "d" * 501, "description"),
    ],
)
def test_add_rejects_invalid_input(task_store: TaskStore, title: str, description: str, field: str) -> None:
    with pytest.raises(ValidationError) as exc:
        task_store.add(title, description)
    assert exc.value.field == field
    assert len(task_store) == 0


def test_add_accepts_limits_after_trimming(task_store: TaskStore) -> None:
    task = task_store.add("  " + "t" * 100 + "  ", "d" * 500)
    assert len(task.title) == 100
    assert len(task.description) == 500


def test_new_tasks_are_prepended(task_store: TaskStore) -> None:
    first = task_store.add("first")
    second = task_store.add("second")
    assert [t.id for t in task_store.all_tasks()] == [second.id, first.id]


def test_ids_do_not_collide_within_the_same_millisecond(store: PersistentStore) -> None:
    tasks = TaskStore(store, clock=FakeClock(step=0.0))
    ids = [tasks.add(f"task {i}").id for i in range(50)]
    assert len(set(ids)) == 50


def test_ids_continue_after_reload(substrate: MemorySubstrate) -> None:
    clock = FakeClock(step=0.0)
    first = TaskStore(PersistentStore(substrate), clock=clock)
    a = first.add("a")

    again = TaskStore(PersistentStore(substrate), clock=clock)
    b = again.add("b")
    assert a.id != b.id
    assert [t.id for t in again.all_tasks()] == [b.id, a.id]


def test_update_merges_fields_and_protects_identity(task_store: TaskStore, clock: FakeClock) -> None:
    task = task_store.add("old title", "old")
    clock.advance(10)

    updated = task_store.update(
        task.id,
        {"title": " new title ", "id": "hijack", "createdAt": 0, "updatedAt": 0},
    )
    assert updated is not None
    assert updated.id == task.id
    assert updated.title == "new title"
    assert updated.description == "old"
    assert updated.created_at == task.created_at
    assert updated.updated_at == task.created_at + 10
    assert task_store.get("hijack") is None


def test_update_never_moves_updated_before_created(task_store: TaskStore, clock: FakeClock) -> None:
    task = task_store.add("task")
    clock.advance(-3600)  # wall clock stepped back
    updated = task_store.update(task.id, {"completed": True})
    assert updated is not None
    assert updated.updated_at >= updated.created_at


def test_update_unknown_id_is_noop(task_store: TaskStore) -> None:
    task_store.add("keep")
    before = task_store.all_tasks()
    assert task_store.update("missing", {"title": "x"}) is None
    assert task_store.toggle_completion("missing") is None
    assert task_store.all_tasks() == before


def test_update_validation_failure_changes_nothing(task_store: TaskStore, store: PersistentStore) -> None:
    task = task_store.add("title")
    with pytest.raises(ValidationError):
        task_store.update(task.id, {"title": "   "})
    assert task_store.get(task.id) == task
    assert store.read("tasks")[0]["title"] == "title"


def test_remove_is_idempotent(task_store: TaskStore) -> None:
    a = task_store.add("a")
    task_store.add("b")

    assert task_store.remove(a.id) is True
    once = task_store.all_tasks()
    assert task_store.remove(a.id) is False
    assert task_store.all_tasks() == once


def test_filters_partition_the_collection(task_store: TaskStore) -> None:
    tasks = [task_store.add(f"t{i}") for i in range(6)]
    for t in tasks[::2]:
        task_store.toggle_completion(t.id)

    all_ids = [t.id for t in task_store.filter("all")]
    active = [t.id for t in task_store.filter(TaskFilter.ACTIVE)]
    completed = [t.id for t in task_store.filter("completed")]

    assert set(active) | set(completed) == set(all_ids)
    assert not set(active) & set(completed)
    assert len(active) + len(completed) == len(all_ids) == 6
    assert len(task_store) == 6


def test_filter_unknown_name(task_store: TaskStore) -> None:
    with pytest.raises(ValueError):
        task_store.filter("archived")


def test_stats(task_store: TaskStore) -> None:
    empty = task_store.stats()
    assert (empty.total, empty.active, empty.completed) == (0, 0, 0)
    assert empty.completion_percentage == 0

    tasks = [task_store.add(f"t{i}") for i in range(3)]
    task_store.toggle_completion(tasks[0].id)
    stats = task_store.stats()
    assert (stats.total, stats.active, stats.completed) == (3, 2, 1)
    assert stats.completion_percentage == 33


def test_collection_survives_reload(substrate: MemorySubstrate, clock: FakeClock) -> None:
    tasks = TaskStore(PersistentStore(substrate), clock=clock)
    a = tasks.add("a", "desc")
    tasks.add("b")
    tasks.toggle_completion(a.id)

    reloaded = TaskStore(PersistentStore(substrate), clock=clock)
    assert reloaded.all_tasks() == tasks.all_tasks()


def test_failed_write_keeps_in_memory_state(substrate: MemorySubstrate, clock: FakeClock) -> None:
    tasks = TaskStore(PersistentStore(substrate), clock=clock)
    substrate.enabled = False

    task = tasks.add("still here")
    assert tasks.get(task.id) == task
    assert len(tasks) == 1


def test_malformed_stored_entries_are_skipped(substrate: MemorySubstrate) -> None:
    substrate.items["tasks"] = (
        '[{"id": "1", "title": "ok", "description": "", "completed": false, '
        '"createdAt": 10, "updatedAt": 12}, 42, {"title": "no id"}, '
        '{"id": "1", "title": "dup"}]'
    )
    tasks = TaskStore(PersistentStore(substrate))
    assert [t.title for t in tasks.all_tasks()] == ["ok"]


def test_store_is_required() -> None:
    with pytest.raises(ValueError):
        TaskStore(None)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("fields", "field"),
    [({"title": 5}, "title"), ({"description": ["x"]}, "description"), ({"completed": "false"}, "completed")],
)
def test_update_rejects_wrongly_typed_fields(task_store: TaskStore, fields: dict, field: str) -> None:
    task = task_store.add("title")
    with pytest.raises(ValidationError) as exc:
        task_store.update(task.id, fields)
    assert exc.value.field == field
    assert task_store.get(task.id) == task


def test_updated_at_advances_when_the_clock_stands_still(store: PersistentStore) -> None:
    tasks = TaskStore(store, clock=FakeClock(step=0.0))
    task = tasks.add("frozen clock")

    toggled = tasks.toggle_completion(task.id)
    assert toggled is not None
    assert toggled.updated_at > task.updated_at

    edited = tasks.update(task.id, {"title": "renamed"})
    assert edited is not None
    assert edited.updated_at > toggled.updated_at
