"""
Post service.

Owns the post lifecycle: listing, search, single-post reads with view
counting, create/update/delete with ownership checks, and the comment list
embedded on each post.
"""

from collections.abc import Iterable
from typing import Any
from uuid import UUID, uuid4

from fastapi import UploadFile

from techtalk.configs.settings import (
    COMMENT_DELETED_MESSAGE,
    POST_DELETED_MESSAGE,
    SEARCH_RESULTS_LIMIT,
    settings,
)
from techtalk.errors import (
    AuthorizationError,
    CommentNotFoundError,
    PostNotFoundError,
    field_error,
)
from techtalk.models import CategoryDB, PostDB, UserDB
from techtalk.monitoring import get_logger
from techtalk.repositories import CategoryRepository, PostRepository, UserRepository
from techtalk.schemas.category import CategorySummary
from techtalk.schemas.comment import CommentCreate, CommentResponse, MessageResponse
from techtalk.schemas.post import (
    Pagination,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from techtalk.schemas.user import AuthorSummary, CommentAuthor
from techtalk.services.media import MediaService
from techtalk.services.slug import generate_unique_slug
from techtalk.utils.helpers import total_pages, utc_now

logger = get_logger(__name__)


def _can_modify(user: UserDB, owner_id: UUID | str) -> bool:
    """Owners and admins may change a post or comment."""
    return user.is_admin or str(user.id) == str(owner_id)


def _comment_user_ids(comments: Iterable[dict[str, Any]]) -> set[UUID]:
    ids = set()
    for comment in comments:
        try:
            ids.add(UUID(str(comment.get("user_id"))))
        except ValueError:
            continue
    return ids


class PostService:
    """Service for posts and their comments."""

    def __init__(
        self,
        post_repo: PostRepository,
        user_repo: UserRepository,
        category_repo: CategoryRepository,
        media: MediaService | None = None,
    ) -> None:
        """
        Initialize the post service.

        Args:
            post_repo: Post repository
            user_repo: User repository, used to resolve authors
            category_repo: Category repository, used to validate and resolve categories
            media: Featured image service
        """
        self.post_repo = post_repo
        self.user_repo = user_repo
        self.category_repo = category_repo
        self.media = media or MediaService()

    # Response assembly

    def _comment_responses(
        self,
        comments: list[dict[str, Any]],
        users: dict[UUID, UserDB],
    ) -> list[CommentResponse]:
        responses = []
        for comment in comments:
            author = users.get(UUID(str(comment["user_id"])))
            responses.append(
                CommentResponse(
                    id=comment["id"],
                    user=CommentAuthor.model_validate(author) if author else None,
                    content=comment["content"],
                    created_at=comment["created_at"],
                ),
            )
        return responses

    async def _to_responses(self, posts: list[PostDB]) -> list[PostResponse]:
        """Render posts with authors, categories and comment authors loaded in batches."""
        user_ids = {post.author_id for post in posts}
        for post in posts:
            user_ids |= _comment_user_ids(post.comments)
        users = await self.user_repo.get_many(user_ids)
        categories = await self.category_repo.get_many(post.category_id for post in posts)

        responses = []
        for post in posts:
            author = users.get(post.author_id)
            category = categories.get(post.category_id)
            responses.append(
                PostResponse(
                    id=post.id,
                    title=post.title,
                    content=post.content,
                    slug=post.slug,
                    excerpt=post.excerpt,
                    featured_image=post.featured_image,
                    author=AuthorSummary.model_validate(author) if author else None,
                    category=CategorySummary.model_validate(category) if category else None,
                    tags=list(post.tags),
                    is_published=post.is_published,
                    view_count=post.view_count,
                    comments=self._comment_responses(post.comments, users),
                    created_at=post.created_at,
                    updated_at=post.updated_at,
                ),
            )
        return responses

    async def _to_response(self, post: PostDB) -> PostResponse:
        return (await self._to_responses([post]))[0]

    async def _require_category(self, category_id: UUID) -> CategoryDB:
        category = await self.category_repo.get_by_id(category_id)
        if not category:
            raise field_error("category", "Invalid category")
        return category

    async def _lock_post(self, post_id: UUID) -> PostDB:
        """Load a post for a read-modify-write, locking its row."""
        post = await self.post_repo.get_for_update(post_id)
        if not post:
            raise PostNotFoundError
        return post

    # Reads

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category: UUID | None = None,
    ) -> PostListResponse:
        """
        Return one page of posts, newest first.

        Args:
            page: 1-based page number
            limit: Page size (1 to 100)
            search: Case-insensitive substring over title and content
            category: Category id to filter by
        """
        search = search.strip() if search else None
        posts, total = await self.post_repo.list_page(
            page=page,
            limit=limit,
            search=search or None,
            category_id=category,
        )
        pages = total_pages(total, limit)
        return PostListResponse(
            posts=await self._to_responses(posts),
            pagination=Pagination(
                current_page=page,
                total_pages=pages,
                total_posts=total,
                has_next=page < pages,
                has_prev=page > 1,
            ),
        )

    async def search_posts(self, query: str | None) -> list[PostResponse]:
        """
        Search title, content and tags.

        Raises:
            ValidationError: If the query is missing or blank
        """
        if not query or not query.strip():
            raise field_error("q", "Search query is required")
        posts = await self.post_repo.search(query.strip(), limit=SEARCH_RESULTS_LIMIT)
        return await self._to_responses(posts)

    async def get_post(self, post_id: UUID) -> PostResponse:
        """
        Fetch a single post, counting the view.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        if not await self.post_repo.increment_view_count(post_id):
            raise PostNotFoundError
        post = await self.post_repo.get_fresh(post_id)
        if not post:
            raise PostNotFoundError
        return await self._to_response(post)

    # Writes

    async def create_post(
        self,
        user: UserDB,
        payload: PostCreate,
        image: UploadFile | None = None,
    ) -> PostResponse:
        """
        Create a post authored by ``user``.

        The image is validated and stored before the row is inserted; if the
        insert fails the stored file is removed again.

        Raises:
            ValidationError: Unknown category or a title without slug characters
            UploadError: The image was rejected or could not be stored
            SlugConflictError: A concurrent writer took the slug
        """
        await self._require_category(payload.category)
        slug = await generate_unique_slug(payload.title, self.post_repo.slug_exists)

        featured_image = settings.DEFAULT_FEATURED_IMAGE
        if image is not None:
            featured_image = await self.media.save_featured_image(image)

        post = PostDB(
            author_id=user.id,
            category_id=payload.category,
            title=payload.title,
            slug=slug,
            content=payload.content,
            excerpt=payload.excerpt,
            featured_image=featured_image,
            is_published=payload.is_published,
            tags=payload.tags,
        )
        try:
            post = await self.post_repo.create(post)
            await self.post_repo.commit()
        except Exception:
            await self.media.delete_featured_image(featured_image)
            raise

        logger.info(f"User {user.id} created post {post.id} ({post.slug})")
        return await self._to_response(post)

    async def update_post(
        self,
        user: UserDB,
        post_id: UUID,
        payload: PostUpdate,
        image: UploadFile | None = None,
    ) -> PostResponse:
        """
        Apply a partial update.

        Only fields the client sent are changed. The slug and author are
        never touched.

        Raises:
            PostNotFoundError: If the post does not exist
            AuthorizationError: Unless ``user`` is the author or an admin
        """
        post = await self._lock_post(post_id)
        if not _can_modify(user, post.author_id):
            raise AuthorizationError("Not authorized to update this post")

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("category") is not None:
            await self._require_category(changes["category"])
            post.category_id = changes["category"]
        for field in ("title", "content", "excerpt", "tags", "is_published"):
            if field in changes and (changes[field] is not None or field == "excerpt"):
                setattr(post, field, changes[field])

        old_image = new_image = None
        if image is not None:
            new_image = await self.media.save_featured_image(image)
            old_image, post.featured_image = post.featured_image, new_image

        post.updated_at = utc_now()
        try:
            post = await self.post_repo.save(post)
            await self.post_repo.commit()
        except Exception:
            await self.media.delete_featured_image(new_image)
            raise

        if old_image is not None:
            await self.media.delete_featured_image(old_image)
        logger.info(f"User {user.id} updated post {post.id}")
        return await self._to_response(post)

    async def delete_post(self, user: UserDB, post_id: UUID) -> MessageResponse:
        """
        Delete a post together with its comments and stored image.

        Raises:
            PostNotFoundError: If the post does not exist
            AuthorizationError: Unless ``user`` is the author or an admin
        """
        post = await self._lock_post(post_id)
        if not _can_modify(user, post.author_id):
            raise AuthorizationError("Not authorized to delete this post")

        image = post.featured_image
        await self.post_repo.delete(post)
        await self.post_repo.commit()
        await self.media.delete_featured_image(image)

        logger.info(f"User {user.id} deleted post {post_id}")
        return MessageResponse(message=POST_DELETED_MESSAGE)

    # Comments

    async def add_comment(
        self,
        user: UserDB,
        post_id: UUID,
        payload: CommentCreate,
    ) -> list[CommentResponse]:
        """
        Append a comment and return the post's full comment list.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        post = await self._lock_post(post_id)
        comment = {
            "id": str(uuid4()),
            "user_id": str(user.id),
            "content": payload.content,
            "created_at": utc_now().isoformat(),
        }
        # Reassign so the JSON column is flagged dirty
        post.comments = [*post.comments, comment]
        post.updated_at = utc_now()
        post = await self.post_repo.save(post)

        users = await self.user_repo.get_many(_comment_user_ids(post.comments))
        return self._comment_responses(post.comments, users)

    async def _remove_comment(self, user: UserDB, post: PostDB, comment_id: str) -> MessageResponse:
        comment = next((c for c in post.comments if c.get("id") == comment_id), None)
        if comment is None:
            raise CommentNotFoundError
        if not _can_modify(user, comment["user_id"]):
            raise AuthorizationError("Not authorized to delete this comment")

        post.comments = [c for c in post.comments if c.get("id") != comment_id]
        post.updated_at = utc_now()
        await self.post_repo.save(post)
        logger.info(f"User {user.id} deleted comment {comment_id} on post {post.id}")
        return MessageResponse(message=COMMENT_DELETED_MESSAGE)

    async def delete_comment(
        self,
        user: UserDB,
        post_id: UUID,
        comment_id: str,
    ) -> MessageResponse:
        """
        Remove one comment from a post.

        Raises:
            PostNotFoundError: If the post does not exist
            CommentNotFoundError: If the post has no such comment
            AuthorizationError: Unless ``user`` wrote the comment or is an admin
        """
        post = await self._lock_post(post_id)
        return await self._remove_comment(user, post, comment_id)

    async def delete_comment_by_id(self, user: UserDB, comment_id: str) -> MessageResponse:
        """Remove a comment given only its id, locating the post that holds it."""
        post = await self.post_repo.find_by_comment_id(comment_id)
        if post is None:
            raise CommentNotFoundError
        return await self._remove_comment(user, post, comment_id)
