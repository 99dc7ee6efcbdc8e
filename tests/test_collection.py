# tests/test_collection.py

from __future__ import annotations

from dataclasses import replace

from shared_todo_client.models import Task, User
from shared_todo_client.services import TaskCollection, TaskFilter

OWNER = User(id="u1", name="Ana", email="ana@x.com")


def make_task(task_id: str, *, completed: bool = False, text: str | None = None) -> Task:
    return Task(id=task_id, text=text or f"task {task_id}", completed=completed, owner=OWNER)


def test_replace_all_keeps_order_and_uniqueness() -> None:
    collection = TaskCollection()
    collection.replace_all([make_task("a"), make_task("b"), make_task("a", text="again")])

    assert collection.ids() == ["a", "b"]
    assert collection.get("a").text == "again"


def test_append_adds_at_end() -> None:
    collection = TaskCollection([make_task("a"), make_task("b")])
    collection.append(make_task("c"))

    assert collection.ids() == ["a", "b", "c"]


def test_append_existing_id_replaces_in_place() -> None:
    collection = TaskCollection([make_task("a"), make_task("b")])
    collection.append(make_task("a", text="changed"))

    assert collection.ids() == ["a", "b"]
    assert collection.get("a").text == "changed"


def test_replace_preserves_position() -> None:
    collection = TaskCollection([make_task("a"), make_task("b"), make_task("c")])
    updated = replace(collection.get("b"), completed=True)

    assert collection.replace(updated) is True
    assert collection.ids() == ["a", "b", "c"]
    assert collection.to_list()[1] is updated
    assert collection.index_of("b") == 1


def test_replace_unknown_is_noop() -> None:
    collection = TaskCollection([make_task("a")])

    assert collection.replace(make_task("zzz")) is False
    assert collection.ids() == ["a"]


def test_remove() -> None:
    collection = TaskCollection([make_task("a"), make_task("b")])

    assert collection.remove("a") is True
    assert collection.remove("a") is False
    assert collection.ids() == ["b"]
    assert "a" not in collection


def test_filters_and_stats() -> None:
    collection = TaskCollection([make_task("a", completed=True), make_task("b"), make_task("c")])

    assert [t.id for t in collection.filtered(TaskFilter.ACTIVE)] == ["b", "c"]
    assert [t.id for t in collection.filtered("completed")] == ["a"]
    assert len(collection.filtered()) == 3

    stats = collection.stats()
    assert (stats.total, stats.completed, stats.active) == (3, 1, 2)
    assert abs(stats.progress - 1 / 3) < 1e-9


def test_stats_of_empty_list() -> None:
    assert TaskCollection().stats().progress == 0.0
