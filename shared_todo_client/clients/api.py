"""HTTP client for the shared to-do REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from shared_todo_client.config import ApiSettings
from shared_todo_client.models import SessionContext

LOGGER = logging.getLogger(__name__)

USER_AGENT = "shared-todo-client/0.1"
GENERIC_ERROR = "Request failed"


class ApiError(RuntimeError):
    """Failed API call: either no response at all or a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TodoApiClient:
    """Thin wrapper around the REST endpoints.

    The bearer token is read from the shared :class:`SessionContext` on every
    call, so a login performed through the session manager is picked up
    without rebuilding the client.
    """

    def __init__(
        self,
        config: ApiSettings,
        context: SessionContext,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._context = context
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            }
        )

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def close(self) -> None:
        self._session.close()

    # region low-level helpers
    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._context.token:
            headers["Authorization"] = f"Bearer {self._context.token}"
        return headers

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = kwargs.pop("headers", {})
        headers.update(self._headers())
        try:
            response = self._session.request(method, url, headers=headers, timeout=self._config.timeout, **kwargs)
        except requests.RequestException as exc:
            LOGGER.warning("API request %s %s failed: %s", method, url, exc)
            raise ApiError(str(exc) or GENERIC_ERROR) from exc

        if response.status_code >= 400:
            message = self._error_message(response)
            LOGGER.warning("API error %s on %s %s: %s", response.status_code, method, url, message)
            raise ApiError(message, status_code=response.status_code)
        return self._decode(response, method, url)

    @staticmethod
    def _decode(response: requests.Response, method: str, url: str) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            LOGGER.warning("Non-JSON response to %s %s", method, url)
            raise ApiError("Invalid JSON in API response", status_code=response.status_code) from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            for key in ("message", "error"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return f"{GENERIC_ERROR} ({response.status_code})"

    # endregion

    # region auth
    def login(self, email: str, password: str) -> Dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def register(self, name: str, email: str, password: str) -> Dict:
        return self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )

    def get_profile(self) -> Dict:
        return self._request("GET", "/auth/me")

    # endregion

    # region todos
    def list_todos(self) -> List[Dict]:
        return self._request("GET", "/todos")

    def create_todo(self, text: str) -> Dict:
        return self._request("POST", "/todos", json={"text": text})

    def update_todo(self, todo_id: str, updates: Dict[str, Any]) -> Dict:
        return self._request("PUT", f"/todos/{todo_id}", json=updates)

    def delete_todo(self, todo_id: str) -> None:
        self._request("DELETE", f"/todos/{todo_id}")

    def share_todo(self, todo_id: str, email: str) -> Dict:
        return self._request("POST", f"/todos/{todo_id}/share", json={"email": email})

    def remove_collaborator(self, todo_id: str, user_id: str) -> Dict:
        return self._request("DELETE", f"/todos/{todo_id}/collaborators/{user_id}")

    # endregion

    # region users
    def search_users(self, query: str) -> List[Dict]:
        return self._request("GET", "/users/search", params={"q": query})

    # endregion


__all__ = ["TodoApiClient", "ApiError"]
