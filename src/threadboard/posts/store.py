"""PostStore: the collaborator-facing API over the shared connection.

Each method runs its whole query sequence inside one SharedConnection.acquire()
and returns redacted, immutable snapshots. Nothing ORM-bound leaves the store.
"""

from __future__ import annotations

from threadboard.db.connection import SharedConnection
from threadboard.posts import service, threads
from threadboard.posts.schemas import PostRead, TreeNode


class PostStore:
    """Post lookup, listing, insertion, soft delete, and reply trees."""

    def __init__(self, shared: SharedConnection) -> None:
        self._shared = shared

    def get(self, post_id: int) -> PostRead:
        """Fetch one post; a deleted post's message is the placeholder."""
        with self._shared.acquire() as db:
            return service.redact(service.get_post(db, post_id))

    def list_roots(self) -> list[PostRead]:
        """All root posts, newest first."""
        with self._shared.acquire() as db:
            return [service.redact(post) for post in service.list_roots(db)]

    def create_root(self, author: str, message: str) -> PostRead:
        with self._shared.acquire() as db:
            return service.redact(service.create_root(db, author, message))

    def create_reply(self, parent_id: int, author: str, message: str) -> PostRead:
        """Reply to parent_id.

        The parent lookup and the insert share one lock acquisition, so the
        parent cannot vanish in between. Replying under a soft-deleted parent
        is allowed. Blank input is rejected before the parent is looked up.
        """
        service.validate_input(author, message)
        with self._shared.acquire() as db:
            parent = service.get_post(db, parent_id)
            return service.redact(service.create_reply(db, parent, author, message))

    def soft_delete(self, post_id: int) -> None:
        with self._shared.acquire() as db:
            service.soft_delete(db, post_id)

    def build_tree(self, post_id: int) -> list[TreeNode]:
        with self._shared.acquire() as db:
            return threads.build_tree(db, post_id)

    def count(self) -> int:
        with self._shared.acquire() as db:
            return service.count_posts(db)
