# storefront/schemas/common.py
import math

from sqlmodel import SQLModel


class Pagination(SQLModel):
    """Page metadata returned next to every paginated list."""

    current_page: int
    total_pages: int
    total: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )
