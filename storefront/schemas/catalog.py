# storefront/schemas/catalog.py
"""
Create/update/read payloads for the taxonomy kinds.

All kinds share `name` and `is_active`; a few carry one extra attribute
(size type, color hex code, tag type).
"""

import re
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class TaxonomyCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    description: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class TaxonomyUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class TaxonomyRead(SQLModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SizeCreate(TaxonomyCreate):
    type: str = Field(max_length=50)


class SizeUpdate(TaxonomyUpdate):
    type: str | None = Field(default=None, max_length=50)


class SizeRead(TaxonomyRead):
    type: str


def _check_hex(v: str | None) -> str | None:
    if v is None:
        return v
    if not HEX_COLOR.match(v):
        raise ValueError("hex_code must look like #RRGGBB")
    return v.upper()


class ColorCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    hex_code: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("hex_code")
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        return _check_hex(v)


class ColorUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    hex_code: str | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("hex_code")
    @classmethod
    def validate_hex(cls, v: str | None) -> str | None:
        return _check_hex(v)


class ColorRead(SQLModel):
    id: uuid.UUID
    name: str
    hex_code: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TagCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)
    type: str | None = Field(default=None, max_length=50)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class TagUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    type: str | None = Field(default=None, max_length=50)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class TagRead(SQLModel):
    id: uuid.UUID
    name: str
    type: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
