# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order: an immutable snapshot of what was bought, where it
    ships and what it cost. Only order_status / payment_status change
    after creation.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # ORD-YYYYMMDD-NNNN
    order_number: str = Field(
        max_length=32,
        unique=True,
        index=True,
    )

    customer_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # Shipping address snapshot
    shipping_name: str
    shipping_street: str
    shipping_city: str
    shipping_state: str
    shipping_zip_code: str
    shipping_country: str
    shipping_phone: str

    # COD only
    payment_method: str = Field(default="COD")

    # pending | paid | failed
    payment_status: str = Field(default="pending")

    # pending | confirmed | processing | shipped | delivered | cancelled
    order_status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    subtotal: float = Field(ge=0)
    shipping_cost: float = Field(default=0.0, ge=0)
    tax_amount: float = Field(default=0.0, ge=0)
    total_amount: float = Field(
        ge=0,
        description="subtotal + shipping_cost + tax_amount",
    )

    notes: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order; price is frozen at order time.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    seller_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_name: str | None = None
    size_id: uuid.UUID | None = Field(default=None, foreign_key="sizes.id")
    color_id: uuid.UUID | None = Field(default=None, foreign_key="colors.id")

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        ge=0,
        description="Unit price at time of order",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderCounter(SQLModel, table=True):
    """
    Per-day order sequence.

    `value` is the last sequence issued for `day` (YYYYMMDD); it only moves
    through a single atomic UPDATE ... SET value = value + 1.
    """

    __tablename__ = "order_counters"

    day: str = Field(primary_key=True, max_length=8)
    value: int = Field(default=0, ge=0)
