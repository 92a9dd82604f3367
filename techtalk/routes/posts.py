"""
Post Routes.

Provides listing, search, CRUD and comment endpoints for posts.

Summary
-------
Endpoints include:
  - List posts (paginated, with search and category filters)
  - Search posts by title, content and tags
  - Get post by id (counts the view)
  - Create post (multipart, optional featured image)
  - Update post (multipart, partial)
  - Delete post
  - Add comment
  - Delete comment

Rate Limiting
-------------
Reads are generous; writes are limited more tightly. Clients that send
`X-API-Key` get higher limits.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from techtalk.decorators import timed
from techtalk.dependencies import PostListQueryDep, PostServiceDep, UserDBDep
from techtalk.errors import validate_model
from techtalk.managers import limiter
from techtalk.schemas.comment import CommentCreate, CommentResponse, MessageResponse
from techtalk.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

TitleForm = Annotated[str | None, Form(description="Post title (1-100 characters)")]
ContentForm = Annotated[str | None, Form(description="Post content")]
CategoryForm = Annotated[str | None, Form(description="Category ID")]
TagsForm = Annotated[
    list[str] | None,
    Form(description="Tags, comma separated or repeated"),
]
ExcerptForm = Annotated[str | None, Form(description="Short summary (max 200 characters)")]
PublishedForm = Annotated[bool | None, Form(alias="isPublished")]
ImageFile = Annotated[
    UploadFile | None,
    File(alias="featuredImage", description="JPEG, PNG or GIF up to 5MB"),
]

_POST_EXAMPLE = {
    "id": "550e8400-e29b-41d4-a716-446655440000",
    "title": "Hello World",
    "content": "First post on the blog.",
    "slug": "hello-world",
    "excerpt": None,
    "featuredImage": "default-post.jpg",
    "author": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "username": "alice",
        "email": "alice@x.com",
        "avatar": None,
    },
    "category": {"id": "0b7f2a1e-5c44-4b5e-9d38-1f2e3a4b5c6d", "name": "Technology"},
    "tags": ["intro"],
    "isPublished": False,
    "viewCount": 0,
    "comments": [],
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-01-01T00:00:00Z",
}

_RATE_LIMITED = {
    "description": "Rate limit exceeded",
    "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
}


def _uploaded(image: UploadFile | None) -> UploadFile | None:
    """Browsers send an empty file part when no image was chosen."""
    return image if image is not None and image.filename else None


def _form_data(**fields: Any) -> dict[str, Any]:
    """Keep only the form fields the client actually sent."""
    return {name: value for name, value in fields.items() if value is not None}


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PostListResponse,
    summary="List posts",
    description="Paginated posts, newest first, optionally filtered by search text or category.",
    responses={429: _RATE_LIMITED},
    operation_id="posts_list",
)
@timed("/posts")
@limiter.limit(lambda key: "300/minute" if "apikey" in key else "100/minute")
async def list_posts(
    request: Request,
    response: Response,
    query: PostListQueryDep,
    service: PostServiceDep,
) -> PostListResponse:
    return await service.list_posts(
        page=query.page,
        limit=query.limit,
        search=query.search,
        category=query.category,
    )


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="Search posts",
    description="Case-insensitive search across title, content and tags (at most 20 results).",
    responses={
        400: {
            "description": "Missing query",
            "content": {"application/json": {"example": {"detail": "Search query is required"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_search",
)
@timed("/posts/search")
@limiter.limit(lambda key: "120/minute" if "apikey" in key else "30/minute")
async def search_posts(
    request: Request,
    response: Response,
    service: PostServiceDep,
    q: Annotated[str | None, Query(description="Search text")] = None,
) -> list[PostResponse]:
    """
    Search posts.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    service : PostService
        Post service dependency.
    q : str | None
        Search text; blank or missing is rejected with 400.

    Returns
    -------
    list[PostResponse]
        Matching posts, newest first.
    """
    return await service.search_posts(q)


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Get post by ID",
    description="Retrieve a post by its UUID. Increments view count.",
    responses={
        200: {"content": {"application/json": {"example": _POST_EXAMPLE}}},
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post not found"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_get",
)
@timed("/posts/get")
@limiter.limit(lambda key: "300/minute" if "apikey" in key else "100/minute")
async def get_post(
    request: Request,
    response: Response,
    post_id: UUID,
    service: PostServiceDep,
) -> PostResponse:
    """Get a post with author, category and comment authors; counts one view."""
    return await service.get_post(post_id)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new post",
    description="Create a post from a multipart form with an optional featured image.",
    responses={
        201: {"content": {"application/json": {"example": _POST_EXAMPLE}}},
        400: {
            "description": "Validation failed",
            "content": {"application/json": {"example": {"detail": "Title is required"}}},
        },
        409: {
            "description": "Slug taken by a concurrent request",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "A post with slug 'hello-world' was created concurrently, "
                        "please retry",
                        "slug": "hello-world",
                    },
                },
            },
        },
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
        429: _RATE_LIMITED,
    },
    operation_id="posts_create",
)
@timed("/posts/create")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "20/minute")
async def create_post(
    request: Request,
    response: Response,
    current_user: UserDBDep,
    service: PostServiceDep,
    title: TitleForm = None,
    content: ContentForm = None,
    category: CategoryForm = None,
    tags: TagsForm = None,
    excerpt: ExcerptForm = None,
    is_published: PublishedForm = None,
    featured_image: ImageFile = None,
) -> PostResponse:
    """
    Create a new post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    current_user : UserDB
        Authenticated author.
    service : PostService
        Post service dependency.
    title, content, category, tags, excerpt, is_published
        Multipart form fields.
    featured_image : UploadFile | None
        Optional image file.

    Returns
    -------
    PostResponse
        The created post.

    Raises
    ------
    ValidationError
        If a field is missing or out of range, or the category is unknown.
    UploadError
        If the image is rejected.
    """
    payload = validate_model(
        PostCreate,
        _form_data(
            title=title,
            content=content,
            category=category,
            tags=tags,
            excerpt=excerpt,
            is_published=is_published,
        ),
    )
    return await service.create_post(current_user, payload, _uploaded(featured_image))


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostResponse,
    summary="Update a post",
    description="Partially update a post. Only the author or an admin may update it.",
    responses={
        403: {
            "description": "Not the author",
            "content": {
                "application/json": {"example": {"detail": "Not authorized to update this post"}},
            },
        },
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Post not found"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="posts_update",
)
@timed("/posts/update")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "20/minute")
async def update_post(
    request: Request,
    response: Response,
    post_id: UUID,
    current_user: UserDBDep,
    service: PostServiceDep,
    title: TitleForm = None,
    content: ContentForm = None,
    category: CategoryForm = None,
    tags: TagsForm = None,
    excerpt: ExcerptForm = None,
    is_published: PublishedForm = None,
    featured_image: ImageFile = None,
) -> PostResponse:
    """Update the fields that were sent; the slug and author never change."""
    payload = validate_model(
        PostUpdate,
        _form_data(
            title=title,
            content=content,
            category=category,
            tags=tags,
            excerpt=excerpt,
            is_published=is_published,
        ),
    )
    return await service.update_post(current_user, post_id, payload, _uploaded(featured_image))


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post",
    description="Delete a post with its comments and image. Author or admin only.",
    responses={
        200: {
            "content": {"application/json": {"example": {"message": "Post deleted successfully"}}},
        },
        403: {"description": "Not the author"},
        404: {"description": "Not found"},
        429: _RATE_LIMITED,
    },
    operation_id="posts_delete",
)
@timed("/posts/delete")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "20/minute")
async def delete_post(
    request: Request,
    response: Response,
    post_id: UUID,
    current_user: UserDBDep,
    service: PostServiceDep,
) -> MessageResponse:
    return await service.delete_post(current_user, post_id)


@router.post(
    "/{post_id}/comments",
    response_class=ORJSONResponse,
    response_model=list[CommentResponse],
    status_code=HTTP_201_CREATED,
    summary="Add a comment",
    description="Append a comment (1-500 characters) and return the post's comments.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": [
                        {
                            "id": "8d2f4c6e-1a3b-4c5d-9e7f-0a1b2c3d4e5f",
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "username": "alice",
                                "avatar": None,
                            },
                            "content": "Great post!",
                            "createdAt": "2025-01-01T00:00:00Z",
                        },
                    ],
                },
            },
        },
        400: {"description": "Comment empty or too long"},
        404: {"description": "Post not found"},
        429: _RATE_LIMITED,
    },
    operation_id="posts_add_comment",
)
@timed("/posts/comments/add")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "30/minute")
async def add_comment(
    request: Request,
    response: Response,
    post_id: UUID,
    comment: CommentCreate,
    current_user: UserDBDep,
    service: PostServiceDep,
) -> list[CommentResponse]:
    """
    Add a comment to a post.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    comment : CommentCreate
        Comment body.

    Returns
    -------
    list[CommentResponse]
        Every comment on the post, in order, with authors resolved.
    """
    return await service.add_comment(current_user, post_id, comment)


@router.delete(
    "/{post_id}/comments/{comment_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a comment",
    description="Remove one comment from a post. Comment author or admin only.",
    responses={403: {"description": "Not the comment author"}, 429: _RATE_LIMITED},
    operation_id="posts_delete_comment",
)
@timed("/posts/comments/delete")
@limiter.limit(lambda key: "60/minute" if "apikey" in key else "30/minute")
async def delete_comment(
    request: Request,
    response: Response,
    post_id: UUID,
    comment_id: str,
    current_user: UserDBDep,
    service: PostServiceDep,
) -> MessageResponse:
    return await service.delete_comment(current_user, post_id, comment_id)
