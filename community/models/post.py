"""Post model for community threads."""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community.models.base import Base

if TYPE_CHECKING:
    from community.models.category import Category
    from community.models.comment import Comment
    from community.models.member import Member
    from community.models.poll import Poll
    from community.models.reaction import Reaction


class PostStatus(str, enum.Enum):
    """Publication status of a post."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Post(Base):
    """A community post, optionally carrying a poll."""

    __tablename__ = "posts"
    __table_args__ = (UniqueConstraint("shop_id", "slug", name="uq_posts_shop_id_slug"),)

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    slug: Mapped[str] = mapped_column(String(300), nullable=False)

    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, name="post_status"),
        default=PostStatus.PUBLISHED,
        nullable=False,
    )
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    author: Mapped["Member"] = relationship("Member")
    category: Mapped["Category | None"] = relationship("Category")
    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    reactions: Mapped[list["Reaction"]] = relationship(
        "Reaction",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    poll: Mapped["Poll | None"] = relationship(
        "Poll",
        back_populates="post",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Post {self.title!r} ({self.status.value})>"
