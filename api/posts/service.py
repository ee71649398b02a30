"""
Post business logic: validation and ownership rules around the post store.

The caller's identity is always an explicit argument (`caller_id`, `None`
for anonymous callers). Mutations run a fixed check sequence:

1. authentication  -> AuthenticationError (401)
2. existence       -> NotFoundError (404)
3. ownership       -> AuthorizationError (403)
4. field values    -> ValidationError (422)

A non-owner therefore learns that a post exists but can never change it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core.errors import AuthenticationError, AuthorizationError, NotFoundError, ValidationError

from . import repository, schemas

logger = logging.getLogger(__name__)

MAX_POST_ID = 2**63 - 1
DELETED_MESSAGE = "Post deleted successfully"


def _to_post_response(row: dict) -> schemas.PostResponse:
    return schemas.PostResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        body=str(row["body"]),
        owner_id=int(row["user_id"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _clean_text(field: str, value: Any, *, max_length: int | None = None) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"The {field} field must be a string.")
    cleaned = value.strip()
    if not cleaned:
        raise ValidationError(f"The {field} field is required.")
    if max_length is not None and len(cleaned) > max_length:
        raise ValidationError(f"The {field} field must not be greater than {max_length} characters.")
    return cleaned


def clean_title(value: Any) -> str:
    return _clean_text("title", value, max_length=schemas.TITLE_MAX_LENGTH)


def clean_body(value: Any) -> str:
    return _clean_text("body", value)


def _require_caller(caller_id: int | None) -> int:
    if caller_id is None:
        raise AuthenticationError()
    return int(caller_id)


async def _find_post(post_id: int) -> dict | None:
    # posts.id is a bigint; ids outside its range cannot exist.
    if not 1 <= post_id <= MAX_POST_ID:
        return None
    return await repository.get_post(post_id)


async def _get_owned_post(caller_id: int | None, post_id: int, *, action: str) -> dict:
    user_id = _require_caller(caller_id)

    row = await _find_post(post_id)
    if row is None:
        raise NotFoundError("Post not found.")

    if int(row["user_id"]) != user_id:
        logger.info(
            "post_%s_denied post_id=%s user_id=%s owner_id=%s",
            action,
            post_id,
            user_id,
            row["user_id"],
        )
        raise AuthorizationError("Unauthorized")
    return row


async def list_posts() -> list[schemas.PostResponse]:
    rows = await repository.list_posts()
    return [_to_post_response(row) for row in rows]


async def create_post(caller_id: int | None, *, title: Any, body: Any) -> schemas.PostResponse:
    user_id = _require_caller(caller_id)
    title = clean_title(title)
    body = clean_body(body)

    row = await repository.create_post(user_id=user_id, title=title, body=body)
    logger.info("post_created post_id=%s user_id=%s", row["id"], user_id)
    return _to_post_response(row)


async def get_post(post_id: int) -> schemas.PostResponse:
    row = await _find_post(post_id)
    if row is None:
        raise NotFoundError("Post not found.")
    return _to_post_response(row)


async def update_post(
    caller_id: int | None,
    post_id: int,
    fields: Mapping[str, Any],
) -> schemas.PostResponse:
    """
    Update `title` and/or `body` of a post owned by `caller_id`.

    Keys other than the mutable fields are ignored, as are `None` values.
    With nothing to change the post is returned as-is.
    """
    row = await _get_owned_post(caller_id, post_id, action="update")

    changes: dict[str, str] = {}
    if fields.get("title") is not None:
        changes["title"] = clean_title(fields["title"])
    if fields.get("body") is not None:
        changes["body"] = clean_body(fields["body"])
    if not changes:
        return _to_post_response(row)

    updated = await repository.update_post(post_id, user_id=int(row["user_id"]), **changes)
    if updated is None:
        # Deleted between the ownership check and the update.
        raise NotFoundError("Post not found.")

    logger.info("post_updated post_id=%s user_id=%s fields=%s", post_id, row["user_id"], sorted(changes))
    return _to_post_response(updated)


async def delete_post(caller_id: int | None, post_id: int) -> schemas.DeletedResponse:
    row = await _get_owned_post(caller_id, post_id, action="delete")

    deleted = await repository.delete_post(post_id, user_id=int(row["user_id"]))
    if not deleted:
        raise NotFoundError("Post not found.")

    logger.info("post_deleted post_id=%s user_id=%s", post_id, row["user_id"])
    return schemas.DeletedResponse(message=DELETED_MESSAGE)
