"""
Authentication and user management schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from staysync.models.base.enums import UserRole, UserStatus
from staysync.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "TokenResponse",
    "UserInviteRequest",
    "UserInviteResponse",
    "UserUpdateRequest",
]


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Invalid email address")
    return value


class RegisterRequest(BaseSchema):
    """Creates a new organization with its owner account."""

    organization_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(BaseSchema):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserResponse(BaseResponseSchema):
    email: str
    full_name: str
    phone: Optional[str] = None
    role: UserRole
    status: UserStatus
    organization_id: str
    last_login_at: Optional[datetime] = None


class TokenResponse(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserInviteRequest(BaseSchema):
    email: str = Field(..., max_length=255)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole
    phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserInviteResponse(BaseSchema):
    user: UserResponse
    temporary_password: str


class UserUpdateRequest(BaseSchema):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=30)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
