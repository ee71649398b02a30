"""
Post API schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

TITLE_MAX_LENGTH = 255


class CreatePostRequest(BaseModel):
    """
    Only the JSON types are checked here; trimming and length rules live in
    `service.clean_title` / `service.clean_body`.
    """

    title: str
    body: str


class UpdatePostRequest(BaseModel):
    """
    Partial update. Values are checked by the service after the ownership
    check; unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    title: Any = None
    body: Any = None


class PostResponse(BaseModel):
    id: int
    title: str
    body: str
    owner_id: int
    created_at: datetime
    updated_at: datetime


class DeletedResponse(BaseModel):
    message: str
