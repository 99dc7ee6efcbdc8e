"""Authentication session management."""
from __future__ import annotations

import logging
from typing import Dict, Optional

from shared_todo_client.clients import ApiError, TodoApiClient
from shared_todo_client.models import SessionContext, User
from shared_todo_client.services.task_mapper import TaskMapper
from shared_todo_client.services.token_store import TokenStore

LOGGER = logging.getLogger(__name__)


class SessionManager:
    """Owns the credential and the identity of the current user.

    State lives in the :class:`SessionContext` shared with the API client;
    every token change is mirrored into the :class:`TokenStore`.
    """

    def __init__(
        self,
        client: TodoApiClient,
        token_store: TokenStore,
        context: SessionContext,
        mapper: Optional[TaskMapper] = None,
    ) -> None:
        self._client = client
        self._store = token_store
        self._context = context
        self._mapper = mapper or TaskMapper()

    @property
    def current_user(self) -> Optional[User]:
        return self._context.user

    @property
    def is_authenticated(self) -> bool:
        return self._context.is_authenticated

    @property
    def loading(self) -> bool:
        return self._context.loading

    # region public API
    def login(self, email: str, password: str) -> User:
        payload = self._client.login(email, password)
        return self._establish(payload)

    def register(self, name: str, email: str, password: str) -> User:
        payload = self._client.register(name, email, password)
        return self._establish(payload)

    def restore_session(self) -> Optional[User]:
        """Validates the persisted token once at startup.

        A rejected or unusable token is discarded and the session stays
        anonymous; API failures are never raised from here.
        """
        if not self._context.loading:
            return self._context.user
        try:
            token = self._store.load_token()
            if not token:
                LOGGER.debug("No stored token, starting anonymous")
                return None
            self._context.token = token
            try:
                profile = self._client.get_profile()
                if not isinstance(profile, dict):
                    raise ApiError("Malformed profile response")
                self._context.user = self._mapper.map_user(profile)
            except (ApiError, ValueError) as exc:
                LOGGER.info("Stored token rejected, clearing it: %s", exc)
                self._set_token(None)
                self._context.user = None
                return None
            LOGGER.info("Session restored for %s", self._context.user.email)
            return self._context.user
        finally:
            self._context.loading = False

    def logout(self) -> None:
        self._set_token(None)
        self._context.user = None

    # endregion

    def _establish(self, payload: Dict) -> User:
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise ApiError("Missing token in authentication response")
        try:
            user = self._mapper.map_user(payload.get("user") or {})
        except ValueError as exc:
            raise ApiError("Missing user in authentication response") from exc
        self._set_token(token)
        self._context.user = user
        LOGGER.info("Authenticated as %s", user.email)
        return user

    def _set_token(self, token: Optional[str]) -> None:
        self._context.token = token
        self._store.save_token(token)


__all__ = ["SessionManager"]
