"""Pydantic schemas for post snapshots, reply trees, and request/response bodies.

PostRead is the read-only snapshot every component outside the store sees.
Request bodies accept raw strings; emptiness is checked by the store so the
error kind stays ValidationError regardless of the caller.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PostRead(BaseModel):
    """Immutable snapshot of a post, with deleted messages already redacted."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    root_id: Optional[int] = None
    parent_id: Optional[int] = None
    author: str
    message: str
    created_at: datetime
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class TreeNode(BaseModel):
    """A post and its direct replies, each a TreeNode in creation order."""

    post: PostRead
    replies: list[TreeNode] = []


class CreatePostRequest(BaseModel):
    """Request body for creating a root post or a reply."""

    author: str
    message: str


class PostCreatedResponse(BaseModel):
    """Response after creating a post; redirect_to points at the thread to show."""

    id: int
    root_id: Optional[int] = None
    redirect_to: str


class ThreadResponse(BaseModel):
    """A single post with its full reply tree."""

    post: PostRead
    replies: list[TreeNode]


class HealthResponse(BaseModel):
    """Liveness report with the stored post count."""

    status: str
    posts: int
