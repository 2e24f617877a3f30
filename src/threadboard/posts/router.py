"""Posts REST API router.

Provides endpoints for listing root posts, showing a post with its reply
tree, creating roots and replies, and soft-deleting posts.

Endpoints are plain (sync) functions: FastAPI runs them in its threadpool,
where they wait on the shared connection lock without blocking the event loop.
Error handling: ValidationError -> 400, PostNotFoundError -> 404,
StorageError/LockError -> 500.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response

from threadboard.exceptions import ForumError, PostNotFoundError, ValidationError
from threadboard.posts.schemas import (
    CreatePostRequest,
    HealthResponse,
    PostCreatedResponse,
    PostRead,
    ThreadResponse,
)
from threadboard.posts.service import MAX_POST_ID
from threadboard.posts.store import PostStore

logger = logging.getLogger(__name__)

posts_router = APIRouter(prefix="/api", tags=["posts"])

# Ids outside the SQLite INTEGER range are rejected with 422 before reaching the store.
PostId = Annotated[int, Path(ge=1, le=MAX_POST_ID)]


# -- Store dependency ---------------------------------------------------------


def _get_store(request: Request) -> PostStore:
    """Return the PostStore opened by the application lifespan."""
    return request.app.state.post_store


def _http_error(e: ForumError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, PostNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    logger.error("Server fault: %s", e)
    return HTTPException(status_code=500, detail=str(e))


# -- Endpoints -----------------------------------------------------------------


@posts_router.get("/posts")
def list_posts(store: PostStore = Depends(_get_store)) -> list[PostRead]:
    """List all root posts, newest first."""
    try:
        return store.list_roots()
    except ForumError as e:
        raise _http_error(e)


@posts_router.post("/posts", status_code=201)
def create_post(
    request: CreatePostRequest,
    store: PostStore = Depends(_get_store),
) -> PostCreatedResponse:
    """Create a root post and point the caller at it."""
    try:
        post = store.create_root(request.author, request.message)
    except ForumError as e:
        raise _http_error(e)

    return PostCreatedResponse(
        id=post.id,
        root_id=post.root_id,
        redirect_to=f"/api/posts/{post.id}",
    )


@posts_router.get("/posts/{post_id}")
def show_post(
    post_id: PostId,
    store: PostStore = Depends(_get_store),
) -> ThreadResponse:
    """Show one post with its full reply tree."""
    try:
        post = store.get(post_id)
        replies = store.build_tree(post_id)
    except ForumError as e:
        raise _http_error(e)

    return ThreadResponse(post=post, replies=replies)


@posts_router.post("/posts/{post_id}/replies", status_code=201)
def create_reply(
    post_id: PostId,
    request: CreatePostRequest,
    store: PostStore = Depends(_get_store),
) -> PostCreatedResponse:
    """Reply to a post and point the caller at the thread root."""
    try:
        reply = store.create_reply(post_id, request.author, request.message)
    except ForumError as e:
        raise _http_error(e)

    return PostCreatedResponse(
        id=reply.id,
        root_id=reply.root_id,
        redirect_to=f"/api/posts/{reply.root_id}",
    )


@posts_router.post("/posts/{post_id}/delete", status_code=204)
def delete_post(
    post_id: PostId,
    store: PostStore = Depends(_get_store),
) -> Response:
    """Soft-delete a post. Its replies and position in the thread remain."""
    try:
        store.soft_delete(post_id)
    except ForumError as e:
        raise _http_error(e)

    return Response(status_code=204)


@posts_router.get("/health")
def health(store: PostStore = Depends(_get_store)) -> HealthResponse:
    """Report liveness and the number of stored posts."""
    try:
        return HealthResponse(status="ok", posts=store.count())
    except ForumError as e:
        raise _http_error(e)
