"""Base repository for database operations."""

from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from techtalk.errors.database import ConflictError, DatabaseError

type FilterValue = str | int | float | bool | UUID | datetime | None


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common read and write operations.

    Subclasses set ``model`` and may override ``_conflict_error`` to turn a
    unique constraint violation into a domain specific error.

    Attributes:
        model: The SQLModel database model type.
        id_field: The name of the primary key field (default: "id").
    """

    model: type[ModelT]
    id_field: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def get_by_id(self, record_id: UUID) -> ModelT | None:
        id_column = getattr(self.model, self.id_field)
        statement = select(self.model).where(id_column == record_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_field(
        self,
        field_name: str,
        value: FilterValue,
    ) -> ModelT | None:
        """
        Get a record by a specific field value.

        Args:
            field_name: Name of the field to search
            value: Value to search for
        """
        field = getattr(self.model, field_name)
        statement = select(self.model).where(field == value)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_many(self, record_ids: Iterable[UUID]) -> dict[UUID, ModelT]:
        """
        Load several records in one query, keyed by id.

        Ids with no matching record are simply absent from the result.
        """
        ids = set(record_ids)
        if not ids:
            return {}
        id_column = getattr(self.model, self.id_field)
        result = await self.session.execute(select(self.model).where(id_column.in_(ids)))
        return {getattr(record, self.id_field): record for record in result.scalars().all()}

    async def count(self) -> int:
        statement = select(func.count()).select_from(self.model)
        result = await self.session.execute(statement)
        count = result.scalar()
        return count if count is not None else 0

    async def count_since(self, since: datetime) -> int:
        """Count records created at or after ``since``."""
        created_at = getattr(self.model, "created_at")  # noqa: B009
        statement = select(func.count()).select_from(self.model).where(created_at >= since)
        result = await self.session.execute(statement)
        return result.scalar() or 0

    async def delete(self, record: ModelT) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def save(self, record: ModelT) -> ModelT:
        """Insert or update ``record`` and reload it."""
        return await self._add_and_refresh(record)

    async def commit(self) -> None:
        """
        Commit the current transaction early.

        Used before side effects outside the database (file removal) that
        must only happen once the write is durable.
        """
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DatabaseError(detail="Database integrity error") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(detail="Failed to commit transaction") from e

    def _conflict_error(self, record: ModelT, error_msg: str) -> ConflictError:
        """Map a unique constraint violation on ``record`` to an error."""
        return ConflictError(detail=f"{self.model.__name__} already exists")

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database with error handling.

        Raises:
            ConflictError: If a unique constraint is violated
            DatabaseError: For other database errors
        """
        try:
            self.session.add(record)
            await self.session.flush()
            await self.session.refresh(record)
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "unique" in error_msg.lower() or "duplicate" in error_msg.lower():
                raise self._conflict_error(record, error_msg) from e
            raise DatabaseError(detail="Database integrity error") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(detail="Failed to save record") from e
        return record

    async def _check_exists_by_field(
        self,
        field_name: str,
        value: FilterValue,
        exclude_id: UUID | None = None,
    ) -> bool:
        """
        Check if a record exists with a specific field value.

        Args:
            field_name: Name of the field to check
            value: Value to check for
            exclude_id: Optional ID to exclude from check (for updates)
        """
        field = getattr(self.model, field_name)
        statement = select(1).where(field == value)

        if exclude_id is not None:
            id_column = getattr(self.model, self.id_field)
            statement = statement.where(id_column != exclude_id)

        result = await self.session.execute(statement.limit(1))
        return result.scalar_one_or_none() is not None
