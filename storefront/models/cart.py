# storefront/models/cart.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field


def make_variant_key(size_id: uuid.UUID | None, color_id: uuid.UUID | None) -> str:
    """
    Encode the (size, color) pair of a line as a non-null string.

    Unique constraints treat NULLs as distinct, so (product, NULL, NULL)
    could otherwise be inserted twice into the same cart.
    """
    return f"{size_id or '-'}:{color_id or '-'}"


class Cart(SQLModel, table=True):
    """
    Shopping cart owned by exactly one of:
      - a registered customer (user_id), or
      - an anonymous session token (session_id).

    One cart per owner key is enforced by the unique constraints.
    total_items / total_price are derived from cart_items and recomputed
    inside the same transaction as every item mutation.
    """

    __tablename__ = "carts"
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (session_id IS NULL)",
            name="ck_carts_single_owner",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        unique=True,
    )

    session_id: str | None = Field(
        default=None,
        max_length=128,
        unique=True,
    )

    total_items: int = Field(default=0, ge=0)
    total_price: float = Field(default=0.0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class CartItem(SQLModel, table=True):
    """
    Line inside a cart.
    One cart cannot have 2 rows for the same (product, size, color).
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint(
            "cart_id", "product_id", "variant_key", name="uq_cart_items_variant"
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_id: uuid.UUID = Field(
        foreign_key="carts.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    size_id: uuid.UUID | None = Field(default=None, foreign_key="sizes.id")
    color_id: uuid.UUID | None = Field(default=None, foreign_key="colors.id")
    variant_key: str = Field(max_length=80)

    quantity: int = Field(
        gt=0,
        description="Must be >= 1",
    )

    price: float = Field(
        ge=0,
        description="Price when added to cart",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
