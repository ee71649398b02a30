"""
Auth security helpers: bcrypt password hashing and signed session tokens.

A session token is an HS256 JWT whose `sid` claim points at a row in the
`sessions` table. The signature and `exp` are checked here; whether the
session is still live (not revoked) is the service's job.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

import bcrypt
import jwt

from core import config

TOKEN_TYPE = "session"


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # In production, set JWT_SECRET in environment.
    return config.env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return config.env_str("JWT_ALG", "HS256")


def session_token_expire_minutes() -> int:
    return max(1, config.env_int("SESSION_TOKEN_EXPIRE_MIN", 60 * 24))


def now_epoch_s() -> int:
    return int(time.time())


def new_session_id() -> str:
    return str(uuid4())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_session_token(*, user_id: int, session_id: str, expires_at: int) -> str:
    payload = {
        "sub": str(user_id),
        "sid": session_id,
        "type": TOKEN_TYPE,
        "iat": now_epoch_s(),
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_session_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Session token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Session token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid session token.") from exc

    if str(payload.get("type") or "").strip().lower() != TOKEN_TYPE:
        raise AuthSecurityError("Token is not a session token.")
    if not str(payload.get("sid") or "").strip():
        raise AuthSecurityError("Session token has no session id.")
    if not str(payload.get("sub") or "").strip().isdigit():
        raise AuthSecurityError("Invalid session token subject.")

    return payload
