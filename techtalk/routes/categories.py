"""Category routes: list (seeding defaults on first use), create and admin reseed."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from techtalk.auth import AdminUserDep
from techtalk.decorators import timed
from techtalk.dependencies import CategoryServiceDep
from techtalk.managers import limiter
from techtalk.schemas.category import CategoryCreate, CategoryResponse, CategorySeedResponse

router = APIRouter(prefix="/categories", tags=["🏷️ Categories"])


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[CategoryResponse],
    summary="List categories",
    description="All categories sorted by name. An empty table is seeded with the defaults.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": [
                        {
                            "id": "0b7f2a1e-5c44-4b5e-9d38-1f2e3a4b5c6d",
                            "name": "Technology",
                            "description": "Posts about technology, programming, and "
                            "software development",
                            "createdAt": "2025-01-01T00:00:00Z",
                        },
                    ],
                },
            },
        },
    },
    operation_id="categories_list",
)
@timed("/categories")
@limiter.limit(lambda key: "300/minute" if "apikey" in key else "100/minute")
async def list_categories(
    request: Request,
    response: Response,
    service: CategoryServiceDep,
) -> list[CategoryResponse]:
    categories = await service.list_categories()
    return [CategoryResponse.model_validate(category) for category in categories]


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=CategoryResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    description="Create a category with a unique name of up to 50 characters.",
    responses={
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {"example": {"detail": "Category 'Python' already exists"}},
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="categories_create",
)
@timed("/categories/create")
@limiter.limit(lambda key: "30/minute" if "apikey" in key else "10/minute")
async def create_category(
    request: Request,
    response: Response,
    payload: CategoryCreate,
    service: CategoryServiceDep,
) -> CategoryResponse:
    """
    Create a category.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    payload : CategoryCreate
        Name and optional description.
    service : CategoryService
        Category service dependency.

    Returns
    -------
    CategoryResponse
        The created category.

    Raises
    ------
    DuplicateCategoryError
        If the name is taken.
    """
    category = await service.create_category(payload)
    return CategoryResponse.model_validate(category)


@router.post(
    "/seed",
    response_class=ORJSONResponse,
    response_model=CategorySeedResponse,
    summary="Reseed categories",
    description="Admin only. Remove unused categories and add back any missing defaults.",
    responses={403: {"description": "Admin access required"}},
    operation_id="categories_seed",
)
@timed("/categories/seed")
async def seed_categories(
    request: Request,
    admin: AdminUserDep,
    service: CategoryServiceDep,
) -> CategorySeedResponse:
    categories = await service.reseed_categories()
    return CategorySeedResponse(
        message="Categories seeded successfully",
        categories=[CategoryResponse.model_validate(category) for category in categories],
    )
