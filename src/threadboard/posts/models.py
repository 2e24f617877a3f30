"""Post ORM model: roots and replies of threaded conversations.

A root post has no root_id and no parent_id. A reply has both: parent_id is
the post directly replied to, root_id is always the thread's root post, never
an intermediate reply. Rows are never physically deleted; deleted_at marks a
soft delete.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from threadboard.db.base import Base


class Post(Base):
    """A forum post or reply."""

    __tablename__ = "forum_posts"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    root_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    author: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    @property
    def is_root(self) -> bool:
        return self.root_id is None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return (
            f"<Post id={self.id} root_id={self.root_id} "
            f"parent_id={self.parent_id} deleted={self.is_deleted}>"
        )
