"""
Post API endpoints.

Reads are public; writes require a bearer token and, for existing posts,
ownership.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/posts")
async def list_posts() -> list[schemas.PostResponse]:
    return await service.list_posts()


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    request: schemas.CreatePostRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PostResponse:
    return await service.create_post(
        int(current_user["id"]),
        title=request.title,
        body=request.body,
    )


@router.get("/posts/{post_id}")
async def get_post(post_id: int) -> schemas.PostResponse:
    return await service.get_post(post_id)


@router.put("/posts/{post_id}")
async def update_post(
    post_id: int,
    request: schemas.UpdatePostRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.PostResponse:
    return await service.update_post(
        int(current_user["id"]),
        post_id,
        request.model_dump(exclude_none=True),
    )


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.DeletedResponse:
    return await service.delete_post(int(current_user["id"]), post_id)
