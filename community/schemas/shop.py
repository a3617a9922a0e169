"""Pydantic schemas for the shop context."""

from datetime import datetime
from typing import Any
from uuid import UUID

from community.schemas.common import BaseSchema


class ShopResponse(BaseSchema):
    """The shop a request is scoped to."""

    id: UUID
    shop_domain: str
    shop_name: str
    is_active: bool
    settings: dict[str, Any]
    created_at: datetime
