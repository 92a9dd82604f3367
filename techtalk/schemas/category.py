from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from techtalk.configs.settings import CATEGORY_DESCRIPTION_MAX_LENGTH, CATEGORY_NAME_MAX_LENGTH


class CategoryCreate(BaseModel):
    """Category creation payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        min_length=1,
        max_length=CATEGORY_NAME_MAX_LENGTH,
        examples=["Python"],
    )
    description: str | None = Field(
        default=None,
        max_length=CATEGORY_DESCRIPTION_MAX_LENGTH,
        examples=["Python language and ecosystem"],
    )


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    name: str
    description: str | None = None
    created_at: datetime = Field(alias="createdAt")


class CategorySummary(BaseModel):
    """Category as embedded in post responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class CategorySeedResponse(BaseModel):
    message: str
    categories: list[CategoryResponse]
