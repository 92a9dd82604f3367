"""Tests for the post service against an in-memory database."""

from io import BytesIO
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from techtalk.errors import (
    AuthorizationError,
    CommentNotFoundError,
    DatabaseError,
    PostNotFoundError,
    SlugConflictError,
    ValidationError,
)
from techtalk.models import CategoryDB, UserDB
from techtalk.repositories import PostRepository
from techtalk.schemas.comment import CommentCreate
from techtalk.schemas.post import PostCreate, PostResponse, PostUpdate
from techtalk.services import PostService


def _upload(
    data: bytes,
    filename: str = "cover.jpg",
    content_type: str = "image/jpeg",
) -> UploadFile:
    return UploadFile(
        file=BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


async def _create(
    service: PostService,
    user: UserDB,
    category: CategoryDB,
    title: str = "Hello World",
    **fields: object,
) -> PostResponse:
    payload = PostCreate.model_validate(
        {"title": title, "content": "Body text", "category": category.id, **fields},
    )
    return await service.create_post(user, payload)


class TestCreatePost:
    """Tests for PostService.create_post."""

    async def test_creates_post_with_slug_and_author(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """A new post gets a slug from its title, the caller as author and no views."""
        post = await _create(post_service, alice, technology, tags="python, web")

        assert post.slug == "hello-world"
        assert post.author is not None
        assert post.author.username == "alice"
        assert post.category is not None
        assert post.category.name == "Technology"
        assert post.view_count == 0
        assert post.tags == ["python", "web"]
        assert post.featured_image == "default-post.jpg"
        assert post.is_published is False
        assert post.comments == []

    async def test_repeated_titles_get_numbered_slugs(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """Identical titles are suffixed -1, -2, ... in creation order."""
        slugs = [(await _create(post_service, alice, technology)).slug for _ in range(3)]

        assert slugs == ["hello-world", "hello-world-1", "hello-world-2"]

    async def test_unknown_category_is_rejected(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """A category id that does not exist fails validation."""
        payload = PostCreate(title="Orphan", content="Body", category=uuid4())

        with pytest.raises(ValidationError) as exc_info:
            await post_service.create_post(alice, payload)

        assert exc_info.value.detail == "Invalid category"
        assert exc_info.value.errors[0]["field"] == "category"

    async def test_title_without_slug_characters_is_rejected(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        with pytest.raises(ValidationError):
            await _create(post_service, alice, technology, title="!!!")

    async def test_stores_featured_image(
        self,
        post_service: PostService,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        """The stored filename returned by the backend is kept on the post."""
        payload = PostCreate(title="With Image", content="Body", category=technology.id)

        post = await post_service.create_post(alice, payload, _upload(valid_jpeg_bytes))

        assert post.featured_image == "post-1700000000000-42.jpg"
        storage.save_image.assert_awaited_once_with(valid_jpeg_bytes, "jpg")

    async def test_failed_insert_removes_stored_image(
        self,
        post_service: PostService,
        post_repo: PostRepository,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        """When the row cannot be written the already stored image is deleted again."""
        payload = PostCreate(title="Doomed", content="Body", category=technology.id)

        with (
            patch.object(post_repo, "create", AsyncMock(side_effect=DatabaseError())),
            pytest.raises(DatabaseError),
        ):
            await post_service.create_post(alice, payload, _upload(valid_jpeg_bytes))

        storage.delete_image.assert_awaited_once_with("post-1700000000000-42.jpg")

    async def test_lost_slug_race_is_a_slug_conflict(
        self,
        post_service: PostService,
        post_repo: PostRepository,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        """A writer whose probed slug was taken meanwhile hits the unique index."""
        await _create(post_service, alice, technology)
        payload = PostCreate(title="Hello World", content="Body", category=technology.id)

        with (
            patch.object(post_repo, "slug_exists", AsyncMock(return_value=False)),
            pytest.raises(SlugConflictError) as exc_info,
        ):
            await post_service.create_post(alice, payload, _upload(valid_jpeg_bytes))

        assert exc_info.value.status_code == 409
        assert exc_info.value.slug == "hello-world"
        storage.delete_image.assert_awaited_once_with("post-1700000000000-42.jpg")


class TestListPosts:
    """Tests for PostService.list_posts."""

    async def test_pagination_over_25_posts(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """25 posts at 10 per page give 3 pages, newest first."""
        for i in range(25):
            await _create(post_service, alice, technology, title=f"Post {i}")

        first = await post_service.list_posts(page=1, limit=10)
        last = await post_service.list_posts(page=3, limit=10)

        assert first.pagination.total_pages == 3
        assert first.pagination.total_posts == 25
        assert first.pagination.has_next is True
        assert first.pagination.has_prev is False
        assert len(first.posts) == 10
        assert first.posts[0].title == "Post 24"
        assert len(last.posts) == 5
        assert last.pagination.has_next is False
        assert last.pagination.has_prev is True

    async def test_filters_by_search_and_category(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
        design: CategoryDB,
    ) -> None:
        await _create(post_service, alice, technology, title="FastAPI tips")
        await _create(post_service, alice, design, title="Colour theory")
        await _create(post_service, alice, design, title="Typography")

        searched = await post_service.list_posts(search="fastapi")
        by_category = await post_service.list_posts(category=design.id)

        assert [p.title for p in searched.posts] == ["FastAPI tips"]
        assert {p.title for p in by_category.posts} == {"Colour theory", "Typography"}
        assert by_category.pagination.total_posts == 2

    async def test_search_treats_wildcards_literally(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        await _create(post_service, alice, technology, title="Plain title")

        result = await post_service.list_posts(search="%")

        assert result.posts == []

    async def test_empty_store(self, post_service: PostService) -> None:
        result = await post_service.list_posts()

        assert result.posts == []
        assert result.pagination.total_pages == 0
        assert result.pagination.has_next is False


class TestSearchPosts:
    """Tests for PostService.search_posts."""

    async def test_matches_tags(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """Search covers tags as well as title and content."""
        await _create(post_service, alice, technology, title="Untitled", tags=["Kubernetes"])
        await _create(post_service, alice, technology, title="Other")

        results = await post_service.search_posts("kubernetes")

        assert [p.title for p in results] == ["Untitled"]

    @pytest.mark.parametrize("query", ['"', ",", "[", "]", "\\"])
    async def test_list_punctuation_never_matches_tags(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
        query: str,
    ) -> None:
        """Newer tagged posts do not crowd an older real match out of the 20 results."""
        await _create(post_service, alice, technology, title=f"Say {query}hi{query}")
        for i in range(20):
            await _create(post_service, alice, technology, title=f"Tagged {i}", tags=["x", "y"])

        results = await post_service.search_posts(query)

        assert [p.title for p in results] == [f"Say {query}hi{query}"]

    async def test_matches_non_ascii_tags(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        await _create(post_service, alice, technology, title="Untitled", tags=["café"])

        results = await post_service.search_posts("café")

        assert [p.title for p in results] == ["Untitled"]

    @pytest.mark.parametrize("query", [None, "", "   "])
    async def test_blank_query_is_rejected(
        self,
        post_service: PostService,
        query: str | None,
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await post_service.search_posts(query)

        assert exc_info.value.detail == "Search query is required"


class TestGetPost:
    """Tests for PostService.get_post."""

    async def test_each_read_counts_one_view(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        """Two reads raise the view count by exactly two."""
        created = await _create(post_service, alice, technology)

        await post_service.get_post(created.id)
        second = await post_service.get_post(created.id)

        assert second.view_count == 2

    async def test_missing_post(self, post_service: PostService) -> None:
        with pytest.raises(PostNotFoundError):
            await post_service.get_post(uuid4())


class TestUpdatePost:
    """Tests for PostService.update_post."""

    async def test_author_updates_sent_fields_only(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
        design: CategoryDB,
    ) -> None:
        """Unsent fields and the slug stay as they were."""
        created = await _create(post_service, alice, technology, tags=["a"])

        updated = await post_service.update_post(
            alice,
            created.id,
            PostUpdate(title="Renamed", category=design.id),
        )

        assert updated.title == "Renamed"
        assert updated.slug == "hello-world"
        assert updated.content == "Body text"
        assert updated.tags == ["a"]
        assert updated.category is not None
        assert updated.category.name == "Design"

    async def test_non_author_is_forbidden_and_post_unchanged(
        self,
        post_service: PostService,
        post_repo: PostRepository,
        alice: UserDB,
        bob: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        with pytest.raises(AuthorizationError) as exc_info:
            await post_service.update_post(bob, created.id, PostUpdate(title="Hijacked"))

        stored = await post_repo.get_fresh(created.id)
        assert exc_info.value.status_code == 403
        assert stored is not None
        assert stored.title == "Hello World"

    async def test_admin_may_update_any_post(
        self,
        post_service: PostService,
        alice: UserDB,
        admin: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        updated = await post_service.update_post(admin, created.id, PostUpdate(is_published=True))

        assert updated.is_published is True
        assert updated.author is not None
        assert updated.author.username == "alice"

    async def test_new_image_replaces_old_one(
        self,
        post_service: PostService,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        """The previous stored image is removed once the update is committed."""
        payload = PostCreate(title="Pictured", content="Body", category=technology.id)
        created = await post_service.create_post(alice, payload, _upload(valid_jpeg_bytes))
        storage.save_image.return_value = "post-1700000000001-7.png"

        updated = await post_service.update_post(
            alice,
            created.id,
            PostUpdate(),
            _upload(valid_jpeg_bytes),
        )

        assert updated.featured_image == "post-1700000000001-7.png"
        storage.delete_image.assert_awaited_once_with("post-1700000000000-42.jpg")

    async def test_missing_post(self, post_service: PostService, alice: UserDB) -> None:
        with pytest.raises(PostNotFoundError):
            await post_service.update_post(alice, uuid4(), PostUpdate(title="x"))


class TestDeletePost:
    """Tests for PostService.delete_post."""

    async def test_author_deletes_post_and_image(
        self,
        post_service: PostService,
        post_repo: PostRepository,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
        valid_jpeg_bytes: bytes,
    ) -> None:
        payload = PostCreate(title="Short lived", content="Body", category=technology.id)
        created = await post_service.create_post(alice, payload, _upload(valid_jpeg_bytes))

        result = await post_service.delete_post(alice, created.id)

        assert result.message == "Post deleted successfully"
        assert await post_repo.get_fresh(created.id) is None
        storage.delete_image.assert_awaited_once_with("post-1700000000000-42.jpg")

    async def test_default_image_is_never_deleted(
        self,
        post_service: PostService,
        storage: MagicMock,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        await post_service.delete_post(alice, created.id)

        storage.delete_image.assert_not_awaited()

    async def test_other_user_cannot_delete(
        self,
        post_service: PostService,
        post_repo: PostRepository,
        alice: UserDB,
        bob: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        with pytest.raises(AuthorizationError):
            await post_service.delete_post(bob, created.id)

        assert await post_repo.get_fresh(created.id) is not None


class TestComments:
    """Tests for adding and removing comments."""

    async def test_add_comment_returns_all_comments_in_order(
        self,
        post_service: PostService,
        alice: UserDB,
        bob: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        await post_service.add_comment(alice, created.id, CommentCreate(content="First"))
        comments = await post_service.add_comment(bob, created.id, CommentCreate(content="Second"))

        assert [c.content for c in comments] == ["First", "Second"]
        assert [c.user.username for c in comments if c.user] == ["alice", "bob"]
        assert comments[0].id != comments[1].id

    async def test_comment_on_missing_post(self, post_service: PostService, alice: UserDB) -> None:
        with pytest.raises(PostNotFoundError):
            await post_service.add_comment(alice, uuid4(), CommentCreate(content="Hi"))

    async def test_author_deletes_own_comment(
        self,
        post_service: PostService,
        alice: UserDB,
        bob: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)
        comments = await post_service.add_comment(bob, created.id, CommentCreate(content="Mine"))

        result = await post_service.delete_comment(bob, created.id, comments[0].id)
        post = await post_service.get_post(created.id)

        assert result.message == "Comment deleted successfully"
        assert post.comments == []

    async def test_post_author_cannot_delete_someone_elses_comment(
        self,
        post_service: PostService,
        alice: UserDB,
        bob: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)
        comments = await post_service.add_comment(bob, created.id, CommentCreate(content="Mine"))

        with pytest.raises(AuthorizationError):
            await post_service.delete_comment(alice, created.id, comments[0].id)

    async def test_admin_deletes_by_comment_id_alone(
        self,
        post_service: PostService,
        alice: UserDB,
        bob: UserDB,
        admin: UserDB,
        technology: CategoryDB,
    ) -> None:
        """The owning post is located from the comment id."""
        created = await _create(post_service, alice, technology)
        await post_service.add_comment(alice, created.id, CommentCreate(content="Keep"))
        comments = await post_service.add_comment(bob, created.id, CommentCreate(content="Drop"))

        await post_service.delete_comment_by_id(admin, comments[1].id)
        post = await post_service.get_post(created.id)

        assert [c.content for c in post.comments] == ["Keep"]

    async def test_unknown_comment(
        self,
        post_service: PostService,
        alice: UserDB,
        technology: CategoryDB,
    ) -> None:
        created = await _create(post_service, alice, technology)

        with pytest.raises(CommentNotFoundError):
            await post_service.delete_comment(alice, created.id, str(uuid4()))
        with pytest.raises(CommentNotFoundError):
            await post_service.delete_comment_by_id(alice, str(uuid4()))
