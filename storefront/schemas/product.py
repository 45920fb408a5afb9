# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.common import Pagination

ProductSort = Literal["newest", "price_asc", "price_desc", "popular", "top_rated"]
FeaturedType = Literal["all", "top_rated", "best_selling", "new_arrivals"]


def _clean_images(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    cleaned = [url.strip() for url in v if url and url.strip()]
    return cleaned


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    The seller is taken from the token, never from the body.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200, min_length=2)
    description: str | None = None
    price: float = Field(gt=0)
    stock: int = Field(default=0, ge=0)
    category_id: uuid.UUID
    brand_id: uuid.UUID
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    material_id: uuid.UUID | None = None
    tag_ids: list[uuid.UUID] = []
    images: list[str] = []
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("images")
    @classmethod
    def clean_images(cls, v: list[str]) -> list[str]:
        return _clean_images(v)


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200, min_length=2)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    stock: int | None = Field(default=None, ge=0)
    category_id: uuid.UUID | None = None
    brand_id: uuid.UUID | None = None
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    material_id: uuid.UUID | None = None
    tag_ids: list[uuid.UUID] | None = None
    images: list[str] | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("images")
    @classmethod
    def clean_images(cls, v: list[str] | None) -> list[str] | None:
        return _clean_images(v)


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    seller_id: uuid.UUID
    name: str
    description: str | None = None
    price: float
    stock: int
    category_id: uuid.UUID
    brand_id: uuid.UUID
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    material_id: uuid.UUID | None = None
    tag_ids: list[uuid.UUID] = []
    images: list[str] = []
    purchases: int
    average_rating: float = 0
    review_count: int = 0
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProductListRead(SQLModel):
    products: list[ProductRead]
    pagination: Pagination


class FeaturedProductsRead(SQLModel):
    """
    Storefront shelves. Only the requested shelf is filled unless
    `type` is "all".
    """

    type: FeaturedType
    top_rated: list[ProductRead] = []
    best_selling: list[ProductRead] = []
    new_arrivals: list[ProductRead] = []


class ProductStatusUpdate(SQLModel):
    """Admin toggle for storefront visibility."""

    model_config = ConfigDict(extra="forbid")

    is_active: bool
