"""
Shared test fixtures.

The repositories are swapped for in-memory fakes with `monkeypatch`, so no
test here needs a running Postgres. Keep feature-specific helpers in the
test module that uses them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from auth import dependencies as auth_dependencies
from auth import repository as auth_repository
from posts import repository as posts_repository


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FakePostStore:
    """Mirrors `posts.repository`, keyed by auto-incremented id."""

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self.writes: list[tuple[str, int]] = []
        self._next_id = 1

    async def list_posts(self) -> list[dict]:
        return [dict(self.rows[key]) for key in sorted(self.rows)]

    async def create_post(self, *, user_id: int, title: str, body: str) -> dict:
        post_id = self._next_id
        self._next_id += 1
        now = _now()
        self.rows[post_id] = {
            "id": post_id,
            "user_id": user_id,
            "title": title,
            "body": body,
            "created_at": now,
            "updated_at": now,
        }
        self.writes.append(("create", post_id))
        return dict(self.rows[post_id])

    async def get_post(self, post_id: int) -> dict | None:
        row = self.rows.get(post_id)
        return dict(row) if row is not None else None

    async def update_post(
        self,
        post_id: int,
        *,
        user_id: int,
        title: str | None = None,
        body: str | None = None,
    ) -> dict | None:
        row = self.rows.get(post_id)
        if row is None or row["user_id"] != user_id:
            return None
        if title is not None:
            row["title"] = title
        if body is not None:
            row["body"] = body
        row["updated_at"] = _now()
        self.writes.append(("update", post_id))
        return dict(row)

    async def delete_post(self, post_id: int, *, user_id: int) -> bool:
        row = self.rows.get(post_id)
        if row is None or row["user_id"] != user_id:
            return False
        del self.rows[post_id]
        self.writes.append(("delete", post_id))
        return True


class FakeAuthStore:
    """Mirrors `auth.repository` for users and sessions."""

    def __init__(self) -> None:
        self.users: dict[int, dict] = {}
        self.sessions: dict[str, dict] = {}
        self._next_user_id = 1

    async def create_user(self, *, name: str, email: str, password_hash: str, is_active: bool = True) -> dict:
        user_id = self._next_user_id
        self._next_user_id += 1
        now = _now()
        self.users[user_id] = {
            "id": user_id,
            "name": name.strip(),
            "email": auth_repository.normalize_email(email),
            "password_hash": password_hash,
            "is_active": is_active,
            "created_at": now,
            "updated_at": now,
        }
        return dict(self.users[user_id])

    async def get_user_by_email(self, email: str) -> dict | None:
        wanted = auth_repository.normalize_email(email)
        for row in self.users.values():
            if row["email"] == wanted:
                return dict(row)
        return None

    async def get_user_by_id(self, user_id: int) -> dict | None:
        row = self.users.get(user_id)
        return dict(row) if row is not None else None

    async def insert_session(
        self,
        *,
        session_id: str,
        user_id: int,
        expires_at: datetime,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> dict:
        self.sessions[session_id] = {
            "id": session_id,
            "user_id": user_id,
            "expires_at": expires_at,
            "revoked_at": None,
            "last_used_at": None,
            "user_agent": user_agent,
            "ip_address": ip_address,
            "created_at": _now(),
        }
        return dict(self.sessions[session_id])

    async def get_session(self, session_id: str) -> dict | None:
        row = self.sessions.get(session_id)
        return dict(row) if row is not None else None

    async def mark_session_used(self, session_id: str) -> None:
        if session_id in self.sessions:
            self.sessions[session_id]["last_used_at"] = _now()

    async def revoke_session(self, session_id: str) -> bool:
        row = self.sessions.get(session_id)
        if row is None or row["revoked_at"] is not None:
            return False
        row["revoked_at"] = _now()
        return True


def _patch_module(monkeypatch: pytest.MonkeyPatch, module: object, fake: object) -> None:
    for name in dir(fake):
        if name.startswith("_"):
            continue
        attr = getattr(fake, name)
        if callable(attr) and hasattr(module, name):
            monkeypatch.setattr(module, name, attr)


@pytest.fixture()
def post_store(monkeypatch: pytest.MonkeyPatch) -> FakePostStore:
    store = FakePostStore()
    _patch_module(monkeypatch, posts_repository, store)
    return store


@pytest.fixture()
def auth_store(monkeypatch: pytest.MonkeyPatch) -> FakeAuthStore:
    store = FakeAuthStore()
    _patch_module(monkeypatch, auth_repository, store)
    return store


@pytest.fixture()
def app():
    # Imported lazily so the env set by other fixtures is in place first.
    from main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> Iterator[TestClient]:
    # Not used as a context manager: the lifespan (DB pool) must not run.
    yield TestClient(app)


@pytest.fixture()
def login_as(app) -> Callable[[int], None]:
    """Make `get_current_user` resolve to the given user id."""

    def _login_as(user_id: int) -> None:
        app.dependency_overrides[auth_dependencies.get_current_user] = lambda: {
            "id": user_id,
            "name": f"user{user_id}",
            "email": f"user{user_id}@example.com",
            "is_active": True,
        }

    return _login_as


@pytest.fixture(autouse=True)
def _session_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "test-secret-long-enough-for-hs256-signing")
    monkeypatch.delenv("SESSION_TOKEN_EXPIRE_MIN", raising=False)
