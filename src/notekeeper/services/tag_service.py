"""Tag and category service business logic."""
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from notekeeper.exceptions import NotFoundOrUnauthorized, ValidationError
from notekeeper.repositories.tag_repository import TagRepository, CategoryRepository
from notekeeper.services.base import action

logger = logging.getLogger(__name__)


def _require_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("name", "Name is required")
    return name


class TagService:
    """Service for tag operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_repo = TagRepository(db)

    @action("Failed to get tags. Please try again later.")
    async def list_tags(self, user_id: str) -> List[dict]:
        """List tags for user, sorted by name."""
        tags = await self.tag_repo.list_by_user(user_id)
        return [tag.to_dict() for tag in tags]

    @action("Failed to get tag. Please try again later.")
    async def get_tag(self, tag_id: str, user_id: str) -> dict:
        tag = await self.tag_repo.get_owned(tag_id, user_id)
        if tag is None:
            raise NotFoundOrUnauthorized("Tag", tag_id)
        return tag.to_dict()

    @action("Failed to create tag. Please try again later.")
    async def create_tag(self, user_id: str, name: str) -> dict:
        tag = await self.tag_repo.create(user_id, _require_name(name))
        logger.info(f"Tag created: {tag.id} by user {user_id}")
        return tag.to_dict()

    @action("Failed to update tag. Please try again later.")
    async def update_tag(self, tag_id: str, user_id: str, name: str) -> dict:
        tag = await self.tag_repo.rename_owned(tag_id, user_id, _require_name(name))
        if tag is None:
            raise NotFoundOrUnauthorized("Tag", tag_id)
        return tag.to_dict()

    @action("Failed to delete tag. Please try again later.")
    async def delete_tag(self, tag_id: str, user_id: str):
        """Delete a tag. Notes referencing it keep the dangling reference."""
        if not await self.tag_repo.delete_owned(tag_id, user_id):
            raise NotFoundOrUnauthorized("Tag", tag_id)
        logger.info(f"Tag deleted: {tag_id} by user {user_id}")


class CategoryService:
    """Service for category operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.category_repo = CategoryRepository(db)

    @action("Failed to get categories. Please try again later.")
    async def list_categories(self, user_id: str) -> List[dict]:
        """List categories for user, sorted by name."""
        categories = await self.category_repo.list_by_user(user_id)
        return [category.to_dict() for category in categories]

    @action("Failed to get category. Please try again later.")
    async def get_category(self, category_id: str, user_id: str) -> dict:
        category = await self.category_repo.get_owned(category_id, user_id)
        if category is None:
            raise NotFoundOrUnauthorized("Category", category_id)
        return category.to_dict()

    @action("Failed to create category. Please try again later.")
    async def create_category(self, user_id: str, name: str) -> dict:
        category = await self.category_repo.create(user_id, _require_name(name))
        logger.info(f"Category created: {category.id} by user {user_id}")
        return category.to_dict()

    @action("Failed to update category. Please try again later.")
    async def update_category(self, category_id: str, user_id: str, name: str) -> dict:
        category = await self.category_repo.rename_owned(category_id, user_id, _require_name(name))
        if category is None:
            raise NotFoundOrUnauthorized("Category", category_id)
        return category.to_dict()

    @action("Failed to delete category. Please try again later.")
    async def delete_category(self, category_id: str, user_id: str):
        """Delete a category. Notes referencing it keep the dangling reference."""
        if not await self.category_repo.delete_owned(category_id, user_id):
            raise NotFoundOrUnauthorized("Category", category_id)
        logger.info(f"Category deleted: {category_id} by user {user_id}")
