"""Post repository for database operations."""

from uuid import UUID

from sqlalchemy import String, cast, desc, func, literal, or_, select, update
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import col

from techtalk.errors.database import ConflictError, SlugConflictError
from techtalk.models import PostDB
from techtalk.repositories.base import BaseRepository
from techtalk.utils.helpers import escape_like


def _contains(column: ColumnElement, term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match with LIKE wildcards escaped."""
    return column.ilike(f"%{escape_like(term)}%", escape="\\")


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Comments live on the post row, so every comment write goes through
    ``get_for_update`` followed by ``save``.
    """

    model = PostDB

    async def create(self, post: PostDB) -> PostDB:
        """
        Insert a new post.

        Raises:
            SlugConflictError: If another writer claimed the slug first
            DatabaseError: For other database errors
        """
        return await self._add_and_refresh(post)

    async def get_fresh(self, post_id: UUID) -> PostDB | None:
        """Load a post, overwriting any stale copy held by the session."""
        result = await self.session.execute(
            select(PostDB)
            .where(col(PostDB.id) == post_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, post_id: UUID) -> PostDB | None:
        """Load a post and lock its row until the transaction ends."""
        result = await self.session.execute(
            select(PostDB)
            .where(col(PostDB.id) == post_id)
            .with_for_update()
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> PostDB | None:
        return await self.get_by_field("slug", slug)

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        return await self._check_exists_by_field("slug", slug, exclude_id)

    async def increment_view_count(self, post_id: UUID) -> bool:
        """
        Atomically add one to the post's view count.

        Returns:
            bool: False if no post has this id
        """
        result = await self.session.execute(
            update(PostDB)
            .where(col(PostDB.id) == post_id)
            .values(view_count=col(PostDB.view_count) + 1)
            .execution_options(synchronize_session=False),
        )
        return bool(result.rowcount)

    async def list_page(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category_id: UUID | None = None,
    ) -> tuple[list[PostDB], int]:
        """
        Get one page of posts, newest first, with the total match count.

        Args:
            page: 1-based page number
            limit: Page size
            search: Optional substring matched against title or content
            category_id: Optional exact category filter

        Returns:
            tuple[list[PostDB], int]: The page and the number of matching posts
        """
        conditions: list[ColumnElement[bool]] = []
        if search:
            conditions.append(
                or_(_contains(col(PostDB.title), search), _contains(col(PostDB.content), search)),
            )
        if category_id is not None:
            conditions.append(col(PostDB.category_id) == category_id)

        count_query = select(func.count()).select_from(PostDB).where(*conditions)
        total = (await self.session.execute(count_query)).scalar() or 0

        query = (
            select(PostDB)
            .where(*conditions)
            .order_by(desc(col(PostDB.created_at)))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    def _tag_contains(self, term: str) -> ColumnElement[bool]:
        """Match ``term`` against individual tag values, never the serialized list."""
        if self.session.get_bind().dialect.name == "postgresql":
            tag_values = func.jsonb_array_elements_text(col(PostDB.tags)).table_valued("value")
        else:
            tag_values = func.json_each(col(PostDB.tags)).table_valued("value")
        return (
            select(literal(1))
            .select_from(tag_values)
            .where(_contains(tag_values.c.value, term))
            .exists()
        )

    async def search(self, term: str, limit: int = 20) -> list[PostDB]:
        """
        Search posts whose title, content or any tag contains ``term``.

        Args:
            term: Substring to look for (case-insensitive)
            limit: Maximum number of results
        """
        query = (
            select(PostDB)
            .where(
                or_(
                    _contains(col(PostDB.title), term),
                    _contains(col(PostDB.content), term),
                    self._tag_contains(term),
                ),
            )
            .order_by(desc(col(PostDB.created_at)))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_by_comment_id(self, comment_id: str) -> PostDB | None:
        """Find the post that owns the comment with ``comment_id``, locking its row."""
        result = await self.session.execute(
            select(PostDB.id).where(_contains(cast(col(PostDB.comments), String), comment_id)),
        )
        for post_id in result.scalars().all():
            post = await self.get_for_update(post_id)
            if post and any(c.get("id") == comment_id for c in post.comments):
                return post
        return None

    def _conflict_error(self, record: PostDB, error_msg: str) -> ConflictError:
        return SlugConflictError(record.slug)
