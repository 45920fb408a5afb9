# storefront/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class CartProductRead(SQLModel):
    """Live catalog view of the product behind a cart line."""

    id: uuid.UUID
    name: str
    price: float
    images: list[str] = []
    stock: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, including subtotal.
    `price` is the snapshot taken when the item was added.
    """

    id: uuid.UUID
    product: CartProductRead
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    quantity: int
    price: float
    subtotal: float
    created_at: datetime
    updated_at: datetime


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    `id` is None for an owner that has not added anything yet.
    """

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    session_id: str | None = None
    items: list[CartItemRead] = []
    total_items: int = 0
    total_price: float = 0.0


class CartMergeRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    session_id: str = Field(min_length=1, max_length=128)


class CartMergeRead(SQLModel):
    merged: bool
    cart: CartRead
