# storefront/schemas/address.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

REQUIRED_FIELDS = ("name", "street", "city", "state", "zip_code", "phone")


def _strip(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class AddressCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    street: str
    city: str
    state: str
    zip_code: str = Field(max_length=20)
    country: str | None = None
    phone: str = Field(max_length=30)
    is_default: bool = False

    @field_validator(*REQUIRED_FIELDS, "country")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        return _strip(v)


class AddressUpdate(SQLModel):
    """Partial update; omitted fields stay as they are."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(default=None, max_length=20)
    country: str | None = None
    phone: str | None = Field(default=None, max_length=30)
    is_default: bool | None = None

    @field_validator(*REQUIRED_FIELDS, "country")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        return _strip(v)


class AddressRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
