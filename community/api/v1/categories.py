"""Post category endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from community.core.deps import AdminMember, CurrentShop, DBSession
from community.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from community.schemas.common import MessageResponse
from community.services.category_service import CategoryService

router = APIRouter()


def _duplicate_name(name: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Category '{name}' already exists in this shop",
    )


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List categories",
)
async def list_categories(
    shop: CurrentShop,
    db: DBSession,
    include_inactive: bool = Query(False, description="Include hidden categories"),
) -> list[CategoryResponse]:
    categories = await CategoryService(db).list_categories(shop.id, include_inactive)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    description="Create a category. Names are unique within a shop. Admin only.",
)
async def create_category(
    data: CategoryCreate,
    admin: AdminMember,
    db: DBSession,
) -> CategoryResponse:
    category = await CategoryService(db).create_category(admin.shop_id, data)
    if category is None:
        raise _duplicate_name(data.name)

    await db.commit()
    return CategoryResponse.model_validate(category)


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
)
async def update_category(
    category_id: UUID,
    data: CategoryUpdate,
    admin: AdminMember,
    db: DBSession,
) -> CategoryResponse:
    service = CategoryService(db)
    category = await service.get_category(category_id, admin.shop_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    updated = await service.update_category(category, data)
    if updated is None:
        raise _duplicate_name(data.name or "")

    await db.commit()
    return CategoryResponse.model_validate(updated)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    summary="Delete category",
    description="Delete a category. Its posts are kept without a category. Admin only.",
)
async def delete_category(
    category_id: UUID,
    admin: AdminMember,
    db: DBSession,
) -> MessageResponse:
    service = CategoryService(db)
    category = await service.get_category(category_id, admin.shop_id)
    if category is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )

    await service.delete_category(category)
    await db.commit()
    return MessageResponse(message="Category deleted")
