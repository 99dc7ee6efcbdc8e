# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from shared_todo_client.clients import TodoApiClient
from shared_todo_client.config import ApiSettings, SearchOptions
from shared_todo_client.models import SessionContext
from shared_todo_client.services import SessionManager, TaskSynchronizer, TokenStore

from .fakes import FakeHttpSession

BASE_URL = "http://api.test/api"


@pytest.fixture()
def http() -> FakeHttpSession:
    return FakeHttpSession()


@pytest.fixture()
def context() -> SessionContext:
    return SessionContext()


@pytest.fixture()
def client(http: FakeHttpSession, context: SessionContext) -> TodoApiClient:
    return TodoApiClient(ApiSettings(base_url=BASE_URL, timeout=5), context, session=http)


@pytest.fixture()
def token_store(tmp_path: Path):
    store = TokenStore(tmp_path / "state.sqlite")
    yield store
    store.close()


@pytest.fixture()
def session_manager(client: TodoApiClient, token_store: TokenStore, context: SessionContext) -> SessionManager:
    return SessionManager(client, token_store, context)


@pytest.fixture()
def synchronizer(client: TodoApiClient) -> TaskSynchronizer:
    return TaskSynchronizer(client, search_options=SearchOptions(min_query_length=2))
