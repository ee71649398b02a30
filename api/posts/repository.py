"""
Post persistence (raw SQL).

Single-row statements only; update and delete also match on `user_id` so
the store never mutates a row for anyone but its owner.
"""

from __future__ import annotations

from core import db

_POST_COLUMNS = "id, user_id, title, body, created_at, updated_at"


async def list_posts() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_POST_COLUMNS}
        FROM posts
        ORDER BY id ASC
        """
    )


async def create_post(*, user_id: int, title: str, body: str) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO posts (user_id, title, body)
        VALUES ($1, $2, $3)
        RETURNING {_POST_COLUMNS}
        """,
        user_id,
        title,
        body,
    )
    if row is None:
        raise RuntimeError("Failed to create post.")
    return row


async def get_post(post_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_POST_COLUMNS}
        FROM posts
        WHERE id = $1
        """,
        post_id,
    )


async def update_post(
    post_id: int,
    *,
    user_id: int,
    title: str | None = None,
    body: str | None = None,
) -> dict | None:
    """
    Apply the non-None fields. Returns None if the row is gone.
    """
    return await db.fetch_one(
        f"""
        UPDATE posts
        SET title = COALESCE($3, title),
            body = COALESCE($4, body),
            updated_at = now()
        WHERE id = $1
          AND user_id = $2
        RETURNING {_POST_COLUMNS}
        """,
        post_id,
        user_id,
        title,
        body,
    )


async def delete_post(post_id: int, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM posts
        WHERE id = $1
          AND user_id = $2
        RETURNING id
        """,
        post_id,
        user_id,
    )
    return row is not None
