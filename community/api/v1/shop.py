"""Current shop context endpoint."""

from fastapi import APIRouter

from community.core.deps import CurrentShop
from community.schemas.shop import ShopResponse

router = APIRouter()


@router.get(
    "",
    response_model=ShopResponse,
    summary="Get current shop",
    description="Return the shop resolved from the request's shop context.",
)
async def get_shop(shop: CurrentShop) -> ShopResponse:
    return ShopResponse.model_validate(shop)
