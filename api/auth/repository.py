"""
Auth persistence helpers (users and sessions).
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db

_USER_COLUMNS = "id, name, email, password_hash, is_active, created_at, updated_at"
_SESSION_COLUMNS = "id, user_id, expires_at, revoked_at, last_used_at, user_agent, ip_address, created_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, name: str, email: str, password_hash: str, is_active: bool = True) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (name, email, password_hash, is_active)
        VALUES ($1, $2, $3, $4)
        RETURNING {_USER_COLUMNS}
        """,
        name.strip(),
        normalize_email(email),
        password_hash,
        is_active,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_USER_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def insert_session(
    *,
    session_id: str,
    user_id: int,
    expires_at: datetime,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> dict:
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    row = await db.fetch_one(
        f"""
        INSERT INTO sessions (id, user_id, expires_at, user_agent, ip_address)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_SESSION_COLUMNS}
        """,
        session_id,
        user_id,
        expires_at,
        user_agent,
        ip_address,
    )
    if row is None:
        raise RuntimeError("Failed to insert session.")
    return row


async def get_session(session_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_SESSION_COLUMNS}
        FROM sessions
        WHERE id = $1
        """,
        session_id,
    )


async def mark_session_used(session_id: str) -> None:
    await db.execute(
        """
        UPDATE sessions
        SET last_used_at = now()
        WHERE id = $1
        """,
        session_id,
    )


async def revoke_session(session_id: str) -> bool:
    row = await db.fetch_one(
        """
        UPDATE sessions
        SET revoked_at = now()
        WHERE id = $1
          AND revoked_at IS NULL
        RETURNING id
        """,
        session_id,
    )
    return row is not None
