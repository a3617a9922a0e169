"""Reaction model for posts and comments."""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community.models.base import Base

if TYPE_CHECKING:
    from community.models.comment import Comment
    from community.models.member import Member
    from community.models.post import Post


class ReactionType(str, enum.Enum):
    """Available reaction types."""

    LIKE = "LIKE"
    LOVE = "LOVE"
    LAUGH = "LAUGH"
    WOW = "WOW"
    APPLAUSE = "APPLAUSE"


class Reaction(Base):
    """A member's reaction to exactly one post or one comment."""

    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint("post_id", "member_id", name="uq_reactions_post_id_member_id"),
        UniqueConstraint("comment_id", "member_id", name="uq_reactions_comment_id_member_id"),
        CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name="single_target",
        ),
    )

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    comment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    type: Mapped[ReactionType] = mapped_column(
        Enum(ReactionType, name="reaction_type"),
        nullable=False,
    )

    # Relationships
    member: Mapped["Member"] = relationship("Member")
    post: Mapped["Post | None"] = relationship("Post", back_populates="reactions")
    comment: Mapped["Comment | None"] = relationship("Comment", back_populates="reactions")

    def __repr__(self) -> str:
        return f"<Reaction {self.type.value} by {self.member_id}>"
