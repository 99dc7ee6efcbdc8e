"""Conversion of API payloads into domain models."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from dateutil import parser

from shared_todo_client.models import Task, User


class TaskMapper:
    """Maps JSON documents returned by the API to :class:`Task` and :class:`User`."""

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        return parser.isoparse(value)

    @staticmethod
    def _identifier(payload: Dict) -> str:
        value = payload.get("_id")
        if value is None:
            value = payload.get("id")
        if value is None:
            raise ValueError(f"Payload without identifier: {payload!r}")
        return str(value)

    @staticmethod
    def _require_list(payload: object, what: str) -> List:
        if not isinstance(payload, list):
            raise ValueError(f"Expected a list of {what}, got {type(payload).__name__}")
        return payload

    def map_user(self, payload: Union[Dict, str]) -> User:
        # unpopulated references arrive as a bare id
        if isinstance(payload, str):
            return User(id=payload, name="", email="")
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a user object, got {type(payload).__name__}")
        return User(
            id=self._identifier(payload),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
        )

    def map_users(self, payload: List) -> List[User]:
        return [self.map_user(item) for item in self._require_list(payload, "users")]

    def map_task(self, payload: Dict) -> Task:
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a task object, got {type(payload).__name__}")
        owner = self.map_user(payload.get("owner") or "")
        raw_collaborators = payload.get("collaborators")
        if raw_collaborators is None:
            raw_collaborators = []
        collaborators: List[User] = []
        seen = {owner.id}
        for raw in self._require_list(raw_collaborators, "collaborators"):
            user = self.map_user(raw)
            if user.id in seen:
                continue
            seen.add(user.id)
            collaborators.append(user)
        return Task(
            id=self._identifier(payload),
            text=payload.get("text") or "",
            completed=bool(payload.get("completed", False)),
            owner=owner,
            collaborators=collaborators,
            created_at=self._parse_datetime(payload.get("createdAt") or payload.get("created_at")),
            updated_at=self._parse_datetime(payload.get("updatedAt") or payload.get("updated_at")),
        )

    def map_tasks(self, payload: List) -> List[Task]:
        return [self.map_task(item) for item in self._require_list(payload, "tasks")]

    def map_wrapped_task(self, payload: Dict) -> Task:
        """Share endpoints answer ``{"todo": {...}}``; a bare task is accepted too."""
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a task object, got {type(payload).__name__}")
        inner = payload.get("todo") if isinstance(payload.get("todo"), dict) else payload
        return self.map_task(inner)


__all__ = ["TaskMapper"]
