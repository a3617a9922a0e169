"""Shop model: the tenant every community row is scoped to."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community.models.base import Base, JSONType

if TYPE_CHECKING:
    from community.models.member import Member


class Shop(Base):
    """A Shopify shop hosting its own community.

    Members, categories, posts, comments, reactions, polls and badges all
    carry a ``shop_id`` pointing here.
    """

    __tablename__ = "shops"

    shop_domain: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    shop_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Shopify owner reference (set once the owner joins)
    owner_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    # Flexible settings storage (UI customization, theme, etc.)
    settings: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
    )

    members: Mapped[list["Member"]] = relationship(
        "Member",
        back_populates="shop",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Shop {self.shop_name} ({self.shop_domain})>"
