"""
Table definitions, applied idempotently at startup.
"""

from __future__ import annotations

import logging

from . import db

logger = logging.getLogger(__name__)

STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id            bigserial PRIMARY KEY,
        name          varchar(255) NOT NULL,
        email         varchar(320) NOT NULL,
        password_hash text NOT NULL,
        is_active     boolean NOT NULL DEFAULT true,
        created_at    timestamptz NOT NULL DEFAULT now(),
        updated_at    timestamptz NOT NULL DEFAULT now()
    )
    """,
    "CREATE UNIQUE INDEX IF NOT EXISTS users_email_lower_idx ON users (lower(email))",
    """
    CREATE TABLE IF NOT EXISTS sessions (
        id           uuid PRIMARY KEY,
        user_id      bigint NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        expires_at   timestamptz NOT NULL,
        revoked_at   timestamptz,
        last_used_at timestamptz,
        user_agent   text,
        ip_address   text,
        created_at   timestamptz NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS sessions_user_id_idx ON sessions (user_id)",
    """
    CREATE TABLE IF NOT EXISTS posts (
        id         bigserial PRIMARY KEY,
        user_id    bigint NOT NULL REFERENCES users (id) ON DELETE CASCADE,
        title      varchar(255) NOT NULL,
        body       text NOT NULL,
        created_at timestamptz NOT NULL DEFAULT now(),
        updated_at timestamptz NOT NULL DEFAULT now()
    )
    """,
    "CREATE INDEX IF NOT EXISTS posts_user_id_idx ON posts (user_id)",
)


async def apply_schema() -> None:
    for statement in STATEMENTS:
        await db.execute(statement)
    logger.info("schema_applied statements=%s", len(STATEMENTS))
