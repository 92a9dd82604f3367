from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from techtalk.configs.settings import (
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)
from techtalk.schemas.user import UserPublic


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    user_id: UUID
    jti: str
    token_type: str = "access"


class RegisterRequest(BaseModel):
    """Registration payload."""

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        examples=["alice"],
    )
    email: EmailStr = Field(examples=["alice@x.com"])
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, examples=["secret1"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(BaseModel):
    """Login payload."""

    email: EmailStr = Field(examples=["alice@x.com"])
    password: str = Field(min_length=1, examples=["secret1"])

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AuthResponse(BaseModel):
    """Issued token together with the public view of the user."""

    token: str
    user: UserPublic
