"""Post store queries: lookup, root listing, root/reply insertion, soft delete.

All functions take db: Session as first arg and return ORM rows. They do not
commit; the caller (PostStore via SharedConnection.acquire) owns the
transaction. Redaction of deleted messages happens in redact(), separately
from the soft delete that records deleted_at.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from threadboard.exceptions import PostNotFoundError, ValidationError
from threadboard.posts.models import Post
from threadboard.posts.schemas import PostRead

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "[deleted]"

# SQLite INTEGER PRIMARY KEY range; larger ids cannot be bound as parameters.
MAX_POST_ID = 2**63 - 1


def _now() -> datetime:
    # Server-local wall clock, stored naive.
    return datetime.now()


def _check_id(post_id: int) -> None:
    """Raise PostNotFoundError for ids no row can ever have."""
    if not 1 <= post_id <= MAX_POST_ID:
        raise PostNotFoundError(post_id)


def validate_input(author: str, message: str) -> None:
    """Raise ValidationError if author or message is blank after trimming."""
    if not author.strip():
        raise ValidationError(message="Author cannot be empty")
    if not message.strip():
        raise ValidationError(message="Message cannot be empty")


def redact(post: Post) -> PostRead:
    """Snapshot a post, replacing the message of a soft-deleted one."""
    snapshot = PostRead.model_validate(post)
    if post.deleted_at is not None:
        return snapshot.model_copy(update={"message": DELETED_MESSAGE})
    return snapshot


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_post(db: Session, post_id: int) -> Post:
    """Fetch one post by id, soft-deleted or not.

    Raises:
        PostNotFoundError: if no row matches.
    """
    _check_id(post_id)
    post = db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    return post


def list_roots(db: Session) -> list[Post]:
    """Return every root post, newest first."""
    stmt = (
        select(Post)
        .where(Post.root_id.is_(None))
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    return list(db.scalars(stmt))


def list_thread(db: Session, root_id: int) -> list[Post]:
    """Return every reply in the thread rooted at root_id, oldest first.

    One query regardless of nesting depth; the root itself is not included.
    """
    stmt = (
        select(Post)
        .where(Post.root_id == root_id)
        .order_by(Post.created_at.asc(), Post.id.asc())
    )
    return list(db.scalars(stmt))


def count_posts(db: Session) -> int:
    """Return the number of stored posts, deleted ones included."""
    return db.scalar(select(func.count(Post.id))) or 0


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_root(db: Session, author: str, message: str) -> Post:
    """Insert a new root post and return it with its assigned id.

    Raises:
        ValidationError: if author or message is blank; nothing is inserted.
    """
    validate_input(author, message)

    post = Post(
        root_id=None,
        parent_id=None,
        author=author,
        message=message,
        created_at=_now(),
        deleted_at=None,
    )
    db.add(post)
    db.flush()

    logger.info("Created root post %d by %r", post.id, author)
    return post


def create_reply(db: Session, parent: Post, author: str, message: str) -> Post:
    """Insert a reply under parent.

    root_id is the parent's root_id when the parent is itself a reply,
    otherwise the parent's own id, so it always names a true root.

    Raises:
        ValidationError: if author or message is blank; nothing is inserted.
    """
    validate_input(author, message)

    root_id = parent.root_id if parent.root_id is not None else parent.id
    reply = Post(
        root_id=root_id,
        parent_id=parent.id,
        author=author,
        message=message,
        created_at=_now(),
        deleted_at=None,
    )
    db.add(reply)
    db.flush()

    logger.info(
        "Created reply %d to post %d in thread %d", reply.id, parent.id, root_id
    )
    return reply


def soft_delete(db: Session, post_id: int) -> None:
    """Mark a live post as deleted.

    A single conditional UPDATE; it only matches rows that exist and are not
    yet deleted.

    Raises:
        PostNotFoundError: if no row was affected (missing or already deleted).
    """
    _check_id(post_id)

    stmt = (
        update(Post)
        .where(Post.id == post_id, Post.deleted_at.is_(None))
        .values(deleted_at=_now())
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        raise PostNotFoundError(
            post_id,
            detail=f"Post {post_id} does not exist or is already deleted",
        )

    # The shared session may still hold this row; reload deleted_at on next access.
    cached = db.identity_map.get(db.identity_key(Post, post_id))
    if cached is not None:
        db.expire(cached, ["deleted_at"])

    logger.info("Soft-deleted post %d", post_id)
