"""Thread assembler: rebuild the reply tree under any post in one bulk fetch.

The whole thread is loaded with a single query on root_id, grouped in memory
by parent_id, then unfolded from the requested post. The unfold pops each
group as it is used, so a post is never emitted twice; cyclic or orphaned
rows are simply left out of the result.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from sqlalchemy.orm import Session

from threadboard.posts.models import Post
from threadboard.posts.schemas import TreeNode
from threadboard.posts.service import get_post, list_thread, redact

logger = logging.getLogger(__name__)


def resolve_root_id(post: Post) -> int:
    """Return the id of the thread root that post belongs to."""
    return post.root_id if post.root_id is not None else post.id


def group_by_parent(posts: list[Post]) -> dict[int | None, list[Post]]:
    """Map parent_id to its direct children, keeping the input order."""
    children: dict[int | None, list[Post]] = defaultdict(list)
    for post in posts:
        children[post.parent_id].append(post)
    return children


def unfold(children: dict[int | None, list[Post]], start_id: int) -> list[TreeNode]:
    """Turn a parent_id -> children mapping into TreeNodes below start_id.

    Iterative, so nesting depth is not bounded by the recursion limit.
    Consumes (removes) every group it visits.
    """
    top: list[TreeNode] = []
    stack: list[tuple[int, list[TreeNode]]] = [(start_id, top)]

    while stack:
        parent_id, siblings = stack.pop()
        for child in children.pop(parent_id, []):
            node = TreeNode(post=redact(child), replies=[])
            siblings.append(node)
            stack.append((child.id, node.replies))

    return top


def build_tree(db: Session, post_id: int) -> list[TreeNode]:
    """Return the reply tree under post_id, direct children first level.

    Two queries in total: the post itself (to find the thread root) and the
    bulk fetch of the thread. A post without replies yields an empty list.

    Raises:
        PostNotFoundError: if post_id does not exist.
    """
    post = get_post(db, post_id)
    root_id = resolve_root_id(post)

    children = group_by_parent(list_thread(db, root_id))
    tree = unfold(children, post_id)

    if post_id == root_id and children:
        leftover = sum(len(group) for group in children.values())
        logger.warning(
            "Thread %d has %d unreachable posts (broken parent links)",
            root_id,
            leftover,
        )

    return tree
