# storefront/schemas/review.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.common import Pagination

ReviewSort = Literal["newest", "oldest", "highest", "lowest"]


def _strip_or_none(v: str | None) -> str | None:
    if v is None:
        return v
    return v.strip() or None


class ReviewCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = Field(default=None, max_length=2000)

    @field_validator("title", "comment")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class ReviewUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = Field(default=None, max_length=2000)

    @field_validator("title", "comment")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip_or_none(v)


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    reviewer_name: str
    rating: int
    title: str | None = None
    comment: str | None = None
    created_at: datetime
    updated_at: datetime


class ReviewListRead(SQLModel):
    reviews: list[ReviewRead]
    pagination: Pagination


class ProductReviewsRead(ReviewListRead):
    """Public review page of a product, with its rating summary."""

    rating_stats: dict[int, int]
    average_rating: float
    review_count: int
