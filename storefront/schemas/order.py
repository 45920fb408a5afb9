# storefront/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.common import Pagination

OrderStatus = Literal[
    "pending", "confirmed", "processing", "shipped", "delivered", "cancelled"
]
PaymentStatus = Literal["pending", "paid", "failed"]
PaymentMethod = Literal["COD"]


class ShippingAddress(SQLModel):
    """
    Address snapshot stored on the order.

    `country` falls back to the configured DEFAULT_COUNTRY when omitted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str | None = None
    phone: str

    @field_validator("name", "street", "city", "state", "zip_code", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderLineCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(gt=0)
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None


class OrderCreate(SQLModel):
    """
    Direct checkout payload (not from the cart).
    Lines are priced at the current catalog price.
    """

    model_config = ConfigDict(extra="forbid")

    items: list[OrderLineCreate]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod = "COD"
    notes: str | None = Field(default=None, max_length=1000)


class CheckoutRequest(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides either:
      - a full shipping_address, or
      - address_id of a saved address
    Backend derives customer, lines, prices and totals.
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address: ShippingAddress | None = None
    address_id: uuid.UUID | None = None
    payment_method: PaymentMethod = "COD"
    notes: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def address_source(self) -> "CheckoutRequest":
        if self.shipping_address is None and self.address_id is None:
            raise ValueError("shipping_address or address_id is required")
        return self


class OrderItemRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str | None = None
    seller_id: uuid.UUID
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None
    quantity: int
    price: float
    line_total: float


class ShippingAddressRead(SQLModel):
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str


class OrderRead(SQLModel):
    """
    Full order view including items.
    """

    id: uuid.UUID
    order_number: str
    customer_id: uuid.UUID
    shipping_address: ShippingAddressRead
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    order_status: OrderStatus
    items: list[OrderItemRead]
    subtotal: float
    shipping_cost: float
    tax_amount: float
    total_amount: float
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class OrderListRead(SQLModel):
    orders: list[OrderRead]
    pagination: Pagination


class OrderStatusUpdate(SQLModel):
    """
    Payload to move an order through its lifecycle.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
