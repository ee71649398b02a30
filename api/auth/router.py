"""
Auth API endpoints: register, login, logout, current user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from . import dependencies, schemas, service

router = APIRouter()


def _client_meta(request: Request) -> dict[str, str | None]:
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": request.client.host if request.client else None,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: schemas.RegisterRequest, request: Request) -> schemas.AuthResponse:
    return await service.register(payload, **_client_meta(request))


@router.post("/login")
async def login(payload: schemas.LoginRequest, request: Request) -> schemas.AuthResponse:
    return await service.login(payload, **_client_meta(request))


@router.post("/logout")
async def logout(
    current: tuple[dict, dict] = Depends(dependencies.get_current_session),
) -> schemas.MessageResponse:
    _, session_row = current
    return await service.logout(str(session_row["id"]))


@router.get("/user")
async def current_user(
    user_row: dict = Depends(dependencies.get_current_user),
) -> schemas.UserResponse:
    return service.me(user_row)
