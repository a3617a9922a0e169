"""Member model: a person's membership inside one shop's community."""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community.models.base import Base

if TYPE_CHECKING:
    from community.models.shop import Shop


class MemberRole(str, enum.Enum):
    """Roles within a shop community."""

    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    MEMBER = "MEMBER"


class Member(Base):
    """Community member scoped to a shop.

    The same email may belong to several shops; each membership is its own
    row with its own role and points.
    """

    __tablename__ = "members"
    __table_args__ = (UniqueConstraint("shop_id", "email", name="uq_members_shop_id_email"),)

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name="member_role"),
        default=MemberRole.MEMBER,
        nullable=False,
    )
    is_shop_owner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Gamification points earned in this shop
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    shop: Mapped["Shop"] = relationship("Shop", back_populates="members")

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN

    @property
    def is_moderator(self) -> bool:
        return self.role in (MemberRole.ADMIN, MemberRole.MODERATOR)

    def __repr__(self) -> str:
        return f"<Member {self.email} ({self.role.value})>"
