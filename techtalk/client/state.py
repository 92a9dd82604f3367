"""
Client-side state holders for auth, categories and posts.

Post writes are applied optimistically: the visible list changes at once
through a ``Speculation`` and is either committed with the server's entity
or rolled back when the request fails.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Self
from uuid import uuid4

from httpx import HTTPError

from techtalk.client.api import ApiError, BlogApiClient, ImageUpload
from techtalk.monitoring import get_logger

logger = get_logger(__name__)

type Entity = dict[str, Any]

TEMP_ID_PREFIX = "temp-"

CLIENT_ERRORS = (ApiError, HTTPError)


@dataclass(frozen=True, slots=True)
class MutationResult:
    success: bool
    error: Exception | None = None


class Speculation:
    """
    A tentative change to a list of entities, settled exactly once.

    ``insert`` stages a new entity under a temporary key at the head of the
    list; ``patch`` merges changes into an existing entity and remembers the
    prior value. ``commit`` swaps in the server's entity; ``rollback``
    removes the temporary entity or restores the prior value. Used as a
    context manager, a speculation still unsettled on exit is rolled back.
    """

    __slots__ = ("_entities", "_key", "_prior", "_settled", "entity_id")

    def __init__(
        self,
        entities: list[Entity],
        entity_id: str,
        prior: Entity | None,
        key: str = "id",
    ) -> None:
        self._entities = entities
        self._key = key
        self._prior = prior
        self._settled = False
        self.entity_id = entity_id

    @classmethod
    def insert(cls, entities: list[Entity], entity: Entity, key: str = "id") -> Self:
        temp_id = f"{TEMP_ID_PREFIX}{uuid4()}"
        entities.insert(0, {**entity, key: temp_id})
        return cls(entities, temp_id, prior=None, key=key)

    @classmethod
    def patch(
        cls,
        entities: list[Entity],
        entity_id: str,
        changes: Entity,
        key: str = "id",
    ) -> Self:
        index = cls._find(entities, entity_id, key)
        prior = entities[index] if index is not None else None
        if index is not None:
            entities[index] = {**entities[index], **changes, key: entity_id}
        return cls(entities, entity_id, prior=prior, key=key)

    @staticmethod
    def _find(entities: list[Entity], entity_id: str, key: str) -> int | None:
        return next(
            (i for i, entity in enumerate(entities) if str(entity.get(key)) == str(entity_id)),
            None,
        )

    @property
    def is_insert(self) -> bool:
        return self.entity_id.startswith(TEMP_ID_PREFIX)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        # Anything that escapes before commit, cancellation included, undoes the change
        if not self._settled:
            self.rollback()

    def _settle(self) -> int | None:
        if self._settled:
            mssg = "Speculation already settled"
            raise RuntimeError(mssg)
        self._settled = True
        return self._find(self._entities, self.entity_id, self._key)

    def commit(self, server_entity: Entity) -> None:
        """Replace the staged entity with the server's version."""
        index = self._settle()
        if index is not None:
            self._entities[index] = server_entity

    def rollback(self) -> None:
        """Undo the staged change."""
        index = self._settle()
        if index is None:
            return
        if self._prior is None:
            del self._entities[index]
        else:
            self._entities[index] = self._prior


class AuthState:
    """The signed-in identity, if any."""

    def __init__(self, api: BlogApiClient) -> None:
        self.api = api
        self.user: Entity | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def _sign_in(self, action: str, call: Awaitable[Entity]) -> MutationResult:
        self.error = None
        try:
            data = await call
        except CLIENT_ERRORS as e:
            self.user = None
            self.error = e.detail if isinstance(e, ApiError) else f"{action} failed"
            return MutationResult(success=False, error=e)
        self.user = data["user"]
        return MutationResult(success=True)

    async def login(self, email: str, password: str) -> MutationResult:
        return await self._sign_in("Login", self.api.login(email, password))

    async def register(self, username: str, email: str, password: str) -> MutationResult:
        return await self._sign_in("Registration", self.api.register(username, email, password))

    async def load_current_user(self) -> None:
        """Restore the identity for a stored token; an invalid token signs out."""
        if not self.api.token:
            return
        try:
            self.user = await self.api.me()
        except CLIENT_ERRORS:
            self.logout()

    def logout(self) -> None:
        self.api.clear_token()
        self.user = None
        self.error = None


class CategoryState:
    """The category list."""

    def __init__(self, api: BlogApiClient) -> None:
        self.api = api
        self.categories: list[Entity] = []
        self.loading = False
        self.error: str | None = None

    async def fetch(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.categories = await self.api.list_categories()
        except CLIENT_ERRORS as e:
            self.error = e.detail if isinstance(e, ApiError) else "Failed to fetch categories"
            logger.warning(f"Error fetching categories: {e}")
        finally:
            self.loading = False

    async def refetch(self) -> None:
        await self.fetch()


class PostState:
    """
    The visible post list with its paging, search and category filter.

    Searching switches to the search endpoint, which is not paginated, so the
    pagination info is cleared while a search is active.
    """

    def __init__(self, api: BlogApiClient, page_size: int = 10) -> None:
        self.api = api
        self.page_size = page_size
        self.posts: list[Entity] = []
        self.pagination: Entity = {}
        self.loading = False
        self.error: str | None = None
        self.current_page = 1
        self.search_query = ""
        self.selected_category = ""

    async def load_posts(self, page: int = 1, search: str = "", category: str = "") -> None:
        self.loading = True
        self.error = None
        try:
            if search:
                self.posts = await self.api.search_posts(search)
                self.pagination = {}
            else:
                data = await self.api.list_posts(
                    page=page,
                    limit=self.page_size,
                    category=category or None,
                )
                self.posts = data["posts"]
                self.pagination = data["pagination"]
            self.current_page = page
            self.search_query = search
            self.selected_category = category
        except CLIENT_ERRORS as e:
            self.error = "Failed to load posts"
            self.posts = []
            logger.warning(f"Error fetching posts: {e}")
        finally:
            self.loading = False

    async def search_posts(self, query: str) -> None:
        if not query.strip():
            await self.load_posts(1, "", self.selected_category)
            return
        await self.load_posts(1, query, "")

    async def filter_by_category(self, category_id: str) -> None:
        await self.load_posts(1, "", category_id)

    async def load_next_page(self) -> None:
        if self.pagination.get("hasNext"):
            await self.load_posts(self.current_page + 1, self.search_query, self.selected_category)

    async def load_prev_page(self) -> None:
        if self.pagination.get("hasPrev"):
            await self.load_posts(self.current_page - 1, self.search_query, self.selected_category)

    async def create_post_optimistic(
        self,
        data: Entity,
        image: ImageUpload | None = None,
    ) -> MutationResult:
        """Show the post at once; drop it again if the server rejects it."""
        self.error = None
        with Speculation.insert(self.posts, data) as speculation:
            try:
                saved = await self.api.create_post(data, image)
            except CLIENT_ERRORS as e:
                speculation.rollback()
                self.error = "Failed to create post"
                return MutationResult(success=False, error=e)
            speculation.commit(saved)
        return MutationResult(success=True)

    async def update_post_optimistic(
        self,
        post_id: str,
        data: Entity,
        image: ImageUpload | None = None,
    ) -> MutationResult:
        """Apply the edit at once; restore the previous post if the server rejects it."""
        self.error = None
        with Speculation.patch(self.posts, post_id, data) as speculation:
            try:
                updated = await self.api.update_post(post_id, data, image)
            except CLIENT_ERRORS as e:
                speculation.rollback()
                self.error = "Failed to update post"
                return MutationResult(success=False, error=e)
            speculation.commit(updated)
        return MutationResult(success=True)
