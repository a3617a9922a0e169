"""Badge model for points-based gamification."""

import uuid

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from community.models.base import Base


class Badge(Base):
    """Badge unlocked once a member reaches ``required_points`` in the shop."""

    __tablename__ = "badges"
    __table_args__ = (UniqueConstraint("shop_id", "name", name="uq_badges_shop_id_name"),)

    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    required_points: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Default badges are seeded per shop and cannot be deleted
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Badge {self.name} ({self.required_points} pts)>"
