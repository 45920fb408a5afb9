# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent account for every role.

    Role:
      - "customer" | "seller" | "admin"
      - guests are represented by the absence of a token (and carry a
        session token for their cart instead).

    Seller accounts start with seller_status="pending" and need admin
    approval before they can write to the catalog.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        description="Display name",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email (unique, stored lower-case)",
    )

    password_hash: str = Field(
        description="bcrypt hash of the password",
    )

    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | seller | admin",
    )

    # pending | approved | rejected (sellers only)
    seller_status: str | None = Field(
        default=None,
        index=True,
    )
    approved_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
