# tests/test_session.py

from __future__ import annotations

import pytest

from shared_todo_client.clients import ApiError

from .fakes import FakeResponse, user_payload


def test_login_stores_token_and_user(session_manager, http, token_store, context) -> None:
    http.queue(FakeResponse(200, {"token": "t1", "user": user_payload()}))

    user = session_manager.login("ana@x.com", "secret")

    assert user.email == "ana@x.com"
    assert http.calls[0].json == {"email": "ana@x.com", "password": "secret"}
    assert token_store.load_token() == "t1"
    assert context.token == "t1"
    assert session_manager.current_user == user


def test_failed_login_keeps_previous_state(session_manager, http, token_store) -> None:
    http.queue(
        FakeResponse(200, {"token": "t1", "user": user_payload()}),
        FakeResponse(401, {"message": "Invalid credentials"}),
    )
    session_manager.login("ana@x.com", "secret")

    with pytest.raises(ApiError, match="Invalid credentials"):
        session_manager.login("ana@x.com", "wrong")

    assert token_store.load_token() == "t1"
    assert session_manager.current_user.id == "u1"


def test_register_sends_name(session_manager, http) -> None:
    http.queue(FakeResponse(201, {"token": "t2", "user": user_payload("u5", "Eve", "eve@x.com")}))

    user = session_manager.register("Eve", "eve@x.com", "secret")

    assert http.calls[0].url.endswith("/auth/register")
    assert http.calls[0].json == {"name": "Eve", "email": "eve@x.com", "password": "secret"}
    assert user.id == "u5"


def test_auth_response_without_token_is_rejected(session_manager, http, token_store) -> None:
    http.queue(FakeResponse(200, {"user": user_payload()}))

    with pytest.raises(ApiError):
        session_manager.login("ana@x.com", "secret")

    assert token_store.load_token() is None
    assert not session_manager.is_authenticated


def test_restore_without_token_makes_no_request(session_manager, http) -> None:
    assert session_manager.loading is True

    assert session_manager.restore_session() is None

    assert http.calls == []
    assert session_manager.loading is False


def test_restore_with_valid_token(session_manager, http, token_store) -> None:
    token_store.save_token("t1")
    http.queue(FakeResponse(200, user_payload()))

    user = session_manager.restore_session()

    assert user.id == "u1"
    assert http.calls[0].headers["Authorization"] == "Bearer t1"
    assert session_manager.is_authenticated
    assert session_manager.loading is False


def test_restore_with_rejected_token_clears_it(session_manager, http, token_store, context) -> None:
    token_store.save_token("stale")
    http.queue(FakeResponse(401, {"message": "Token expired"}))

    assert session_manager.restore_session() is None

    assert token_store.load_token() is None
    assert context.token is None
    assert session_manager.current_user is None
    assert session_manager.loading is False


def test_restore_runs_once(session_manager, http, token_store) -> None:
    token_store.save_token("t1")
    http.queue(FakeResponse(200, user_payload()))

    session_manager.restore_session()
    session_manager.restore_session()

    assert len(http.calls) == 1


def test_logout_is_idempotent(session_manager, http, token_store, context) -> None:
    http.queue(FakeResponse(200, {"token": "t1", "user": user_payload()}))
    session_manager.login("ana@x.com", "secret")

    session_manager.logout()
    session_manager.logout()

    assert token_store.load_token() is None
    assert context.token is None
    assert not session_manager.is_authenticated
