# storefront/schemas/wishlist.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Priority = Literal["low", "medium", "high"]


class WishlistCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class WishlistUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_public: bool | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class WishlistItemCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    notes: str | None = Field(default=None, max_length=500)
    priority: Priority = "medium"


class WishlistItemRead(SQLModel):
    id: uuid.UUID
    wishlist_id: uuid.UUID
    product_id: uuid.UUID
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    notes: str | None = None
    priority: Priority
    created_at: datetime


class WishlistRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    is_default: bool
    is_public: bool
    item_count: int = 0
    created_at: datetime
    updated_at: datetime


class WishlistDetailRead(WishlistRead):
    items: list[WishlistItemRead] = []
