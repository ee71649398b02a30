"""
Auth business logic: registration, login, logout and token resolution.

Every issued token is backed by a `sessions` row, so logout takes effect
immediately even though the token's own `exp` is still in the future.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import asyncpg

from core.errors import AuthenticationError, AuthorizationError, ConflictError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        is_active=bool(user_row["is_active"]),
        created_at=user_row["created_at"],
    )


async def _issue_session_token(
    *,
    user_row: dict,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> str:
    user_id = int(user_row["id"])
    expires_at = _utc_now() + timedelta(minutes=security.session_token_expire_minutes())

    session_row = await repository.insert_session(
        session_id=security.new_session_id(),
        user_id=user_id,
        expires_at=expires_at,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return security.build_session_token(
        user_id=user_id,
        session_id=str(session_row["id"]),
        expires_at=int(expires_at.timestamp()),
    )


async def register(
    payload: schemas.RegisterRequest,
    *,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> schemas.AuthResponse:
    existing = await repository.get_user_by_email(payload.email)
    if existing is not None:
        raise ConflictError("Email is already registered.")

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            name=payload.name,
            email=payload.email,
            password_hash=password_hash,
        )
    except asyncpg.UniqueViolationError as exc:
        # A concurrent registration won the unique email index.
        raise ConflictError("Email is already registered.") from exc
    logger.info("user_registered user_id=%s", user_row["id"])

    token = await _issue_session_token(user_row=user_row, user_agent=user_agent, ip_address=ip_address)
    return schemas.AuthResponse(user=_to_user_response(user_row), token=token)


async def login(
    payload: schemas.LoginRequest,
    *,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        logger.info("login_failed reason=unknown_email")
        raise AuthenticationError("Invalid email or password.")

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        logger.info("login_failed reason=bad_password user_id=%s", user_row["id"])
        raise AuthenticationError("Invalid email or password.")

    # Checked after the password so inactive accounts are not revealed to guessers.
    if not bool(user_row.get("is_active", False)):
        raise AuthorizationError("User is inactive.")

    token = await _issue_session_token(user_row=user_row, user_agent=user_agent, ip_address=ip_address)
    return schemas.AuthResponse(user=_to_user_response(user_row), token=token)


async def logout(session_id: str) -> schemas.MessageResponse:
    revoked = await repository.revoke_session(session_id)
    logger.info("session_revoked session_id=%s revoked=%s", session_id, revoked)
    return schemas.MessageResponse(message="Logged out successfully")


async def resolve_session(session_token: str) -> tuple[dict, dict]:
    """
    Resolve a bearer token to its (user row, session row).

    Raises `AuthenticationError` unless the token is well-signed and unexpired,
    its session exists, is not revoked or expired and belongs to the token's
    subject, and that user still exists. Inactive users get `AuthorizationError`.
    """
    try:
        payload = security.decode_session_token(session_token)
    except security.AuthSecurityError as exc:
        raise AuthenticationError(str(exc)) from exc

    user_id = int(payload["sub"])
    session_row = await repository.get_session(str(payload["sid"]))
    if session_row is None or int(session_row["user_id"]) != user_id:
        raise AuthenticationError("Unknown session.")
    if session_row.get("revoked_at") is not None:
        raise AuthenticationError("Session has been revoked.")

    expires_at = session_row.get("expires_at")
    if not isinstance(expires_at, datetime) or expires_at <= _utc_now():
        raise AuthenticationError("Session has expired.")

    user_row = await repository.get_user_by_id(user_id)
    if user_row is None:
        raise AuthenticationError("User not found.")
    if not bool(user_row.get("is_active", False)):
        raise AuthorizationError("User is inactive.")

    await repository.mark_session_used(str(session_row["id"]))
    return user_row, session_row


def me(user_row: dict) -> schemas.UserResponse:
    return _to_user_response(user_row)
