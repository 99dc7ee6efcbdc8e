"""Domain entity definitions."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(slots=True)
class User:
    """A registered user of the to-do service."""

    id: str
    name: str
    email: str


@dataclass(slots=True)
class Task:
    """A to-do item with an owner and zero or more collaborators."""

    id: str
    text: str
    completed: bool
    owner: User
    collaborators: List[User] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_owner(self, user_id: str) -> bool:
        return self.owner.id == user_id

    def is_collaborator(self, user_id: str) -> bool:
        return any(user.id == user_id for user in self.collaborators)

    def can_edit(self, user_id: str) -> bool:
        """Owner and collaborators may edit text and toggle completion."""
        return self.is_owner(user_id) or self.is_collaborator(user_id)

    def can_share(self, user_id: str) -> bool:
        """Only the owner manages collaborators and deletes the task."""
        return self.is_owner(user_id)


@dataclass
class SessionContext:
    """Authentication state threaded explicitly through the client.

    ``loading`` starts as ``True`` and is switched off once the stored
    credential has been checked at startup.
    """

    token: Optional[str] = None
    user: Optional[User] = None
    loading: bool = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


__all__ = ["User", "Task", "SessionContext"]
