"""Tag and Category repositories for database operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from typing import Optional, List, Iterable
from notekeeper.models.note import new_id, utcnow
from notekeeper.models.tag import Tag, Category


class NamedRecordRepository:
    """Owner-scoped operations shared by tags and categories."""

    model = None

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_by_user(self, user_id: str) -> List:
        """List a user's records sorted by name."""
        result = await self.db.execute(
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.name.asc())
        )
        return list(result.scalars().all())

    async def get_owned(self, record_id: str, user_id: str):
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == record_id, self.model.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_many(self, record_ids: Iterable[str]) -> List:
        """Fetch records by id; ids that match nothing are skipped."""
        record_ids = list(set(record_ids))
        if not record_ids:
            return []
        result = await self.db.execute(
            select(self.model).where(self.model.id.in_(record_ids))
        )
        return list(result.scalars().all())

    async def create(self, user_id: str, name: str):
        record = self.model(id=new_id(), user_id=user_id, name=name)
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def rename_owned(self, record_id: str, user_id: str, name: str):
        """Rename in one UPDATE scoped to the owner. None when nothing matched."""
        result = await self.db.execute(
            update(self.model)
            .where(self.model.id == record_id, self.model.user_id == user_id)
            .values(name=name, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return None
        await self.db.commit()
        return await self.get_owned(record_id, user_id)

    async def delete_owned(self, record_id: str, user_id: str) -> bool:
        """Delete in one DELETE scoped to the owner. Notes keep their references."""
        result = await self.db.execute(
            delete(self.model)
            .where(self.model.id == record_id, self.model.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return False
        await self.db.commit()
        return True


class TagRepository(NamedRecordRepository):
    """Repository for Tag model."""

    model = Tag


class CategoryRepository(NamedRecordRepository):
    """Repository for Category model."""

    model = Category
