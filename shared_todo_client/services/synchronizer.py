"""Reconciliation of the local task list with the server."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

from shared_todo_client.clients import ApiError, TodoApiClient
from shared_todo_client.config import SearchOptions
from shared_todo_client.models import Task, User
from shared_todo_client.services.collection import TaskCollection
from shared_todo_client.services.task_mapper import TaskMapper

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class TaskSynchronizer:
    """Keeps a :class:`TaskCollection` consistent with server responses.

    Each operation is a single round trip. The collection is patched only
    after the server answered successfully and always with the record the
    server returned; a failed call leaves it untouched, stores the message in
    :attr:`last_error` and re-raises the :class:`ApiError`.
    """

    def __init__(
        self,
        client: TodoApiClient,
        collection: Optional[TaskCollection] = None,
        task_mapper: Optional[TaskMapper] = None,
        search_options: Optional[SearchOptions] = None,
    ) -> None:
        self._client = client
        self._collection = collection if collection is not None else TaskCollection()
        self._mapper = task_mapper or TaskMapper()
        self._search = search_options or SearchOptions()
        self.loading = False
        self.last_error: Optional[str] = None

    @property
    def tasks(self) -> TaskCollection:
        return self._collection

    # region public API
    def load(self) -> bool:
        """Replaces the collection with the server list; failures are recorded, not raised."""
        self.loading = True
        self.last_error = None
        try:
            tasks = self._remote("load", lambda: self._mapper.map_tasks(self._client.list_todos()))
        except ApiError:
            return False
        finally:
            self.loading = False
        self._collection.replace_all(tasks)
        LOGGER.info("Loaded %s tasks", len(self._collection))
        return True

    def create(self, text: str) -> Task:
        task = self._remote("create", lambda: self._mapper.map_task(self._client.create_todo(text)))
        self._collection.append(task)
        LOGGER.debug("Created task %s", task.id)
        return task

    def update(self, task_id: str, **fields: Any) -> Task:
        task = self._remote(
            "update",
            lambda: self._mapper.map_task(self._client.update_todo(task_id, fields)),
        )
        if not self._collection.replace(task):
            LOGGER.debug("Updated task %s is not in the local list", task_id)
        return task

    def delete(self, task_id: str) -> None:
        self._remote("delete", lambda: self._client.delete_todo(task_id))
        self._collection.remove(task_id)
        LOGGER.debug("Deleted task %s", task_id)

    def share(self, task_id: str, email: str) -> Task:
        task = self._remote(
            "share",
            lambda: self._mapper.map_wrapped_task(self._client.share_todo(task_id, email)),
        )
        self._collection.replace(task)
        LOGGER.info("Shared task %s with %s", task_id, email)
        return task

    def remove_collaborator(self, task_id: str, user_id: str) -> Task:
        task = self._remote(
            "remove_collaborator",
            lambda: self._mapper.map_wrapped_task(self._client.remove_collaborator(task_id, user_id)),
        )
        self._collection.replace(task)
        LOGGER.info("Removed collaborator %s from task %s", user_id, task_id)
        return task

    def toggle(self, task_id: str) -> Task:
        current = self._collection.get(task_id)
        if current is None:
            raise KeyError(task_id)
        return self.update(task_id, completed=not current.completed)

    def rename(self, task_id: str, text: str) -> Optional[Task]:
        """Sends the trimmed text unless it equals the current one."""
        trimmed = text.strip()
        current = self._collection.get(task_id)
        if current is not None and current.text == trimmed:
            return None
        return self.update(task_id, text=trimmed)

    def search_users(self, query: str) -> List[User]:
        if len(query) < self._search.min_query_length:
            return []
        payload = self._client.search_users(query)
        try:
            return self._mapper.map_users(payload)
        except ValueError as exc:
            raise ApiError("Malformed user list in API response") from exc

    # endregion

    def _remote(self, action: str, call: Callable[[], T]) -> T:
        try:
            try:
                return call()
            except ValueError as exc:
                raise ApiError(f"Malformed response to {action}") from exc
        except ApiError as exc:
            self.last_error = exc.message
            LOGGER.warning("Task %s failed: %s", action, exc.message)
            raise


__all__ = ["TaskSynchronizer"]
