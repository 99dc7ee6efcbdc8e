"""Ordered local collection of tasks."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from shared_todo_client.models import Task


class TaskFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ListStats:
    total: int
    completed: int

    @property
    def active(self) -> int:
        return self.total - self.completed

    @property
    def progress(self) -> float:
        return self.completed / self.total if self.total else 0.0


class TaskCollection:
    """Tasks keyed by id with a separately tracked insertion order.

    Replacing a record never moves it; ids are unique.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._items: Dict[str, Task] = {}
        self._order: List[str] = []
        if tasks is not None:
            self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Task]:
        return (self._items[task_id] for task_id in self._order)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._items

    def get(self, task_id: str) -> Optional[Task]:
        return self._items.get(task_id)

    def index_of(self, task_id: str) -> int:
        return self._order.index(task_id)

    def ids(self) -> List[str]:
        return list(self._order)

    def to_list(self) -> List[Task]:
        return list(self)

    # region mutations
    def replace_all(self, tasks: Iterable[Task]) -> None:
        items: Dict[str, Task] = {}
        order: List[str] = []
        for task in tasks:
            if task.id not in items:
                order.append(task.id)
            items[task.id] = task
        self._items = items
        self._order = order

    def append(self, task: Task) -> None:
        if task.id in self._items:
            self._items[task.id] = task
            return
        self._items[task.id] = task
        self._order.append(task.id)

    def replace(self, task: Task) -> bool:
        if task.id not in self._items:
            return False
        self._items[task.id] = task
        return True

    def remove(self, task_id: str) -> bool:
        if task_id not in self._items:
            return False
        del self._items[task_id]
        self._order.remove(task_id)
        return True

    # endregion

    # region views
    def filtered(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> List[Task]:
        task_filter = TaskFilter(task_filter)
        if task_filter is TaskFilter.ACTIVE:
            return [task for task in self if not task.completed]
        if task_filter is TaskFilter.COMPLETED:
            return [task for task in self if task.completed]
        return self.to_list()

    def stats(self) -> ListStats:
        completed = sum(1 for task in self._items.values() if task.completed)
        return ListStats(total=len(self), completed=completed)

    # endregion


__all__ = ["TaskCollection", "TaskFilter", "ListStats"]
