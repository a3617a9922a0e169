"""Per-shop community customization endpoints."""

from typing import Any

from fastapi import APIRouter

from community.core.deps import AdminMember, CurrentMember, CurrentShop, DBSession
from community.schemas.customization import (
    DEFAULT_CUSTOMIZATION,
    CustomizationResponse,
    CustomizationUpdate,
)

router = APIRouter()


def _merged(shop_settings: dict[str, Any] | None) -> CustomizationResponse:
    stored = (shop_settings or {}).get("customization", {})
    return CustomizationResponse(**{**DEFAULT_CUSTOMIZATION, **stored})


@router.get(
    "",
    response_model=CustomizationResponse,
    summary="Get customization",
    description="The shop's community colours, font and images, merged over the defaults.",
)
async def get_customization(
    shop: CurrentShop,
    _member: CurrentMember,
) -> CustomizationResponse:
    return _merged(shop.settings)


@router.patch(
    "",
    response_model=CustomizationResponse,
    summary="Update customization",
    description="Partially update the shop's customization. Only provided fields change. Admin only.",
)
async def update_customization(
    data: CustomizationUpdate,
    shop: CurrentShop,
    _admin: AdminMember,
    db: DBSession,
) -> CustomizationResponse:
    current_settings = dict(shop.settings or {})

    current = dict(current_settings.get("customization", {}))
    current.update(data.model_dump(exclude_unset=True))
    current_settings["customization"] = current

    # Reassign so the JSON column is flagged as changed
    shop.settings = current_settings
    await db.commit()

    return _merged(current_settings)
