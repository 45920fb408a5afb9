# storefront/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.common import Pagination

# App-level roles. "guest" = no token, so we don't store it here.
Role = Literal["customer", "seller", "admin"]
SellerStatus = Literal["pending", "approved", "rejected"]

MIN_PASSWORD_LENGTH = 6


class UserRead(SQLModel):
    """Response schema returned to clients (never exposes the hash)."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    seller_status: SellerStatus | None = None
    approved_at: datetime | None = None
    created_at: datetime


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Only editable field is `name` here.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class PasswordChange(SQLModel):
    model_config = ConfigDict(extra="forbid")

    current_password: str
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class SellerApproval(SQLModel):
    """
    Admin-only decision on a seller account.
    """

    model_config = ConfigDict(extra="forbid")
    status: Literal["approved", "rejected"]


class SellerStatusRead(SQLModel):
    seller_id: uuid.UUID
    status: SellerStatus
    approved_at: datetime | None = None


class UserListRead(SQLModel):
    users: list[UserRead]
    pagination: Pagination
