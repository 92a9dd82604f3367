"""Category repository for database operations."""

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from techtalk.errors.database import ConflictError, DuplicateCategoryError
from techtalk.models import CategoryDB, PostDB
from techtalk.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryDB]):
    """Repository for Category database operations."""

    model = CategoryDB

    async def list_all(self) -> list[CategoryDB]:
        result = await self.session.execute(select(CategoryDB).order_by(col(CategoryDB.name)))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> CategoryDB | None:
        return await self.get_by_field("name", name)

    async def create(self, category: CategoryDB) -> CategoryDB:
        """
        Insert a category.

        Raises:
            DuplicateCategoryError: If the name is already taken
        """
        return await self._add_and_refresh(category)

    async def add_all(self, categories: Iterable[CategoryDB]) -> None:
        """
        Insert several categories in a single flush.

        Raises:
            ConflictError: If any of the names already exists
        """
        try:
            self.session.add_all(list(categories))
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(detail="One or more categories already exist") from e

    async def delete_unreferenced(self) -> int:
        """
        Delete every category that no post points at.

        Returns:
            int: Number of deleted categories
        """
        referenced = select(PostDB.category_id).distinct()
        result = await self.session.execute(
            delete(CategoryDB)
            .where(col(CategoryDB.id).not_in(referenced))
            .execution_options(synchronize_session=False),
        )
        await self.session.flush()
        return result.rowcount or 0

    def _conflict_error(self, record: CategoryDB, error_msg: str) -> ConflictError:
        return DuplicateCategoryError(record.name)
