# storefront/services/review_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.models.review import Review
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.common import Pagination
from storefront.schemas.review import (
    ProductReviewsRead,
    ReviewCreate,
    ReviewListRead,
    ReviewRead,
    ReviewUpdate,
)

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Product reviews.

    - one review per customer and product (409 on a second one)
    - customers read, edit and delete only their own reviews
    - every write refreshes the product's rating summary in the same
      transaction
    """

    def __init__(self, repo: ReviewRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    # ---- helpers ----

    def _to_read(self, session: Session, review: Review) -> ReviewRead:
        user = session.get(User, review.user_id)
        return ReviewRead.model_validate(
            review, update={"reviewer_name": user.name if user else "Deleted user"}
        )

    def _page(self, session: Session, page: int, limit: int, sort: str = "newest", **filters):
        total = self.repo.count(session, **filters)
        reviews = self.repo.list_reviews(
            session, skip=(page - 1) * limit, limit=limit, sort=sort, **filters
        )
        return [self._to_read(session, r) for r in reviews], Pagination.build(page, limit, total)

    def _get_owned(self, session: Session, customer: User, review_id: uuid.UUID) -> Review:
        review = self.repo.get_for_user(session, customer.id, review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def _get_active_product(self, session: Session, product_id: uuid.UUID):
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return product

    # ---- public ----

    def list_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
        sort: str = "newest",
        rating: int | None = None,
    ) -> ProductReviewsRead:
        product = self._get_active_product(session, product_id)
        reviews, pagination = self._page(
            session, page, limit, sort, product_id=product_id, rating=rating
        )
        return ProductReviewsRead(
            reviews=reviews,
            pagination=pagination,
            rating_stats=self.repo.rating_distribution(session, product_id),
            average_rating=product.average_rating,
            review_count=product.review_count,
        )

    # ---- customer ----

    def list_mine(
        self, session: Session, customer: User, page: int = 1, limit: int = 10
    ) -> ReviewListRead:
        reviews, pagination = self._page(session, page, limit, user_id=customer.id)
        return ReviewListRead(reviews=reviews, pagination=pagination)

    def get_mine(self, session: Session, customer: User, review_id: uuid.UUID) -> ReviewRead:
        return self._to_read(session, self._get_owned(session, customer, review_id))

    def create_review(
        self, session: Session, customer: User, payload: ReviewCreate
    ) -> ReviewRead:
        self._get_active_product(session, payload.product_id)

        review = Review(user_id=customer.id, **payload.model_dump())
        try:
            self.repo.add(session, review)
            self.repo.refresh_product_stats(session, review.product_id)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("You have already reviewed this product")
        except Exception:
            session.rollback()
            raise
        session.refresh(review)

        logger.info("Customer %s reviewed product %s", customer.id, review.product_id)
        return self._to_read(session, review)

    def update_review(
        self,
        session: Session,
        customer: User,
        review_id: uuid.UUID,
        payload: ReviewUpdate,
    ) -> ReviewRead:
        review = self._get_owned(session, customer, review_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field == "rating" and value is None:
                continue
            setattr(review, field, value)
        review.updated_at = datetime.now(timezone.utc)
        try:
            session.add(review)
            session.flush()
            self.repo.refresh_product_stats(session, review.product_id)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(review)
        return self._to_read(session, review)

    def delete_review(self, session: Session, customer: User, review_id: uuid.UUID) -> None:
        review = self._get_owned(session, customer, review_id)
        product_id = review.product_id
        try:
            self.repo.delete(session, review)
            self.repo.refresh_product_stats(session, product_id)
            session.commit()
        except Exception:
            session.rollback()
            raise
        logger.info("Customer %s deleted review %s", customer.id, review_id)

