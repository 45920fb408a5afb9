# storefront/models/wishlist.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Wishlist(SQLModel, table=True):
    """
    Named product list owned by a customer ("My Wishlist" is the default).
    """

    __tablename__ = "wishlists"
    __table_args__ = (
        UniqueConstraint("customer_id", "name", name="uq_wishlists_customer_name"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    customer_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_default: bool = Field(default=False)
    is_public: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WishlistItem(SQLModel, table=True):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("wishlist_id", "product_id", name="uq_wishlist_items_product"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    wishlist_id: uuid.UUID = Field(foreign_key="wishlists.id", index=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    size_id: uuid.UUID | None = Field(default=None, foreign_key="sizes.id")
    color_id: uuid.UUID | None = Field(default=None, foreign_key="colors.id")
    notes: str | None = Field(default=None, max_length=500)

    # low | medium | high
    priority: str = Field(default="medium")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
