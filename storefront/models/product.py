# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry listed by a seller.

    Taxonomy references (category, brand, size, color, material) are plain
    foreign keys; tags live in the product_tags link table.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    seller_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Seller (users.id) who owns the listing",
    )

    name: str = Field(
        max_length=200,
        min_length=2,
        index=True,
    )

    description: str | None = None

    price: float = Field(
        gt=0,
        description="Current unit price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    category_id: uuid.UUID = Field(foreign_key="categories.id", index=True)
    brand_id: uuid.UUID = Field(foreign_key="brands.id", index=True)
    size_id: uuid.UUID | None = Field(default=None, foreign_key="sizes.id")
    color_id: uuid.UUID | None = Field(default=None, foreign_key="colors.id")
    material_id: uuid.UUID | None = Field(default=None, foreign_key="materials.id")

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Public image URLs",
    )

    purchases: int = Field(
        default=0,
        ge=0,
        description="Units sold through placed orders",
    )

    average_rating: float = Field(
        default=0,
        ge=0,
        le=5,
        description="Mean review rating, one decimal; 0 without reviews",
    )
    review_count: int = Field(default=0, ge=0)

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductTag(SQLModel, table=True):
    """Many-to-many link between products and tags."""

    __tablename__ = "product_tags"

    product_id: uuid.UUID = Field(foreign_key="products.id", primary_key=True)
    tag_id: uuid.UUID = Field(foreign_key="tags.id", primary_key=True, index=True)
