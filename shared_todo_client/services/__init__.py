"""Service layer of the client."""

from .collection import ListStats, TaskCollection, TaskFilter
from .session import SessionManager
from .synchronizer import TaskSynchronizer
from .task_mapper import TaskMapper
from .token_store import TokenStore

__all__ = [
    "TaskSynchronizer",
    "SessionManager",
    "TaskCollection",
    "TaskFilter",
    "ListStats",
    "TaskMapper",
    "TokenStore",
]
