"""Post category management."""

from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from community.models.category import Category
from community.models.post import Post
from community.schemas.category import CategoryCreate, CategoryUpdate


class CategoryService:
    """Service for a shop's post categories."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_categories(self, shop_id: UUID, include_inactive: bool = False) -> list[Category]:
        query = select(Category).where(Category.shop_id == shop_id)
        if not include_inactive:
            query = query.where(Category.is_active == True)  # noqa: E712

        result = await self.db.execute(query.order_by(Category.order, Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: UUID, shop_id: UUID) -> Category | None:
        """Get category by ID, scoped to shop."""
        query = select(Category).where(
            Category.id == category_id,
            Category.shop_id == shop_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_name(self, shop_id: UUID, name: str) -> Category | None:
        query = select(Category).where(
            Category.shop_id == shop_id,
            Category.name == name,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def resolve(self, shop_id: UUID, value: str) -> Category | None:
        """Find a category by name, falling back to its id."""
        category = await self.get_by_name(shop_id, value)
        if category:
            return category

        try:
            category_id = UUID(value)
        except ValueError:
            return None
        return await self.get_category(category_id, shop_id)

    async def create_category(self, shop_id: UUID, data: CategoryCreate) -> Category | None:
        """Create a category. Returns None when the name is already used in the shop."""
        if await self.get_by_name(shop_id, data.name):
            return None

        category = Category(shop_id=shop_id, **data.model_dump())
        self.db.add(category)
        await self.db.flush()
        return category

    async def update_category(self, category: Category, data: CategoryUpdate) -> Category | None:
        """Apply a partial update. Returns None when renaming onto an existing name."""
        update_data = data.model_dump(exclude_unset=True)

        new_name = update_data.get("name")
        if new_name and new_name != category.name:
            if await self.get_by_name(category.shop_id, new_name):
                return None

        for field, value in update_data.items():
            setattr(category, field, value)

        await self.db.flush()
        return category

    async def delete_category(self, category: Category) -> None:
        """Delete a category; its posts stay with no category."""
        await self.db.execute(
            update(Post)
            .where(
                Post.shop_id == category.shop_id,
                Post.category_id == category.id,
            )
            .values(category_id=None)
        )
        await self.db.delete(category)
        await self.db.flush()
