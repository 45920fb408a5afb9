# storefront/repositories/review_repo.py
import uuid

from sqlalchemy import delete, update
from sqlmodel import Session, select, func

from storefront.models.product import Product
from storefront.models.review import Review

SORT_COLUMNS = {
    "newest": (Review.created_at.desc(),),
    "oldest": (Review.created_at.asc(),),
    "highest": (Review.rating.desc(), Review.created_at.desc()),
    "lowest": (Review.rating.asc(), Review.created_at.desc()),
}


class ReviewRepository:
    """Data access layer for reviews (no commits)."""

    def _filtered(
        self,
        stmt,
        *,
        product_id: uuid.UUID | None = None,
        user_id: uuid.UUID | None = None,
        rating: int | None = None,
    ):
        if product_id is not None:
            stmt = stmt.where(Review.product_id == product_id)
        if user_id is not None:
            stmt = stmt.where(Review.user_id == user_id)
        if rating is not None:
            stmt = stmt.where(Review.rating == rating)
        return stmt

    def list_reviews(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        sort: str = "newest",
        **filters,
    ) -> list[Review]:
        stmt = self._filtered(select(Review), **filters)
        stmt = stmt.order_by(*SORT_COLUMNS[sort]).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def count(self, session: Session, **filters) -> int:
        stmt = self._filtered(select(func.count()).select_from(Review), **filters)
        return session.exec(stmt).one()

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, review_id: uuid.UUID
    ) -> Review | None:
        stmt = select(Review).where(Review.id == review_id, Review.user_id == user_id)
        return session.exec(stmt).first()

    def product_ids_for_user(self, session: Session, user_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(Review.product_id).where(Review.user_id == user_id)
        return list(session.exec(stmt).all())

    def add(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.flush()
        return review

    def delete(self, session: Session, review: Review) -> None:
        session.delete(review)
        session.flush()

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> None:
        """Remove every review by the user and refresh the products they rated."""
        product_ids = self.product_ids_for_user(session, user_id)
        session.exec(delete(Review).where(Review.user_id == user_id))
        for product_id in product_ids:
            self.refresh_product_stats(session, product_id)

    def rating_distribution(self, session: Session, product_id: uuid.UUID) -> dict[int, int]:
        """Review count per star (1-5), zero-filled."""
        stmt = (
            select(Review.rating, func.count())
            .where(Review.product_id == product_id)
            .group_by(Review.rating)
        )
        distribution = {stars: 0 for stars in range(5, 0, -1)}
        for stars, count in session.exec(stmt).all():
            distribution[stars] = count
        return distribution

    def refresh_product_stats(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Recompute products.average_rating (one decimal) and review_count
        from the reviews table in a single UPDATE.
        """
        average = (
            select(func.coalesce(func.round(func.avg(Review.rating), 1), 0))
            .where(Review.product_id == product_id)
            .scalar_subquery()
        )
        count = (
            select(func.count(Review.id))
            .where(Review.product_id == product_id)
            .scalar_subquery()
        )
        session.exec(
            update(Product)
            .where(Product.id == product_id)
            .values(average_rating=average, review_count=count)
        )
