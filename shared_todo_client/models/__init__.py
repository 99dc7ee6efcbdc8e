"""Domain models of the to-do client."""

from .entities import SessionContext, Task, User

__all__ = [
    "Task",
    "User",
    "SessionContext",
]
