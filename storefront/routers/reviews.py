# storefront/routers/reviews.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_customer
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import (
    ReviewCreate,
    ReviewListRead,
    ReviewRead,
    ReviewUpdate,
)
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])

service = ReviewService(ReviewRepository(), ProductRepository())


@router.get("", response_model=ApiResponse[ReviewListRead])
def list_my_reviews(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """Reviews written by the current customer, newest first."""
    return success_response(service.list_mine(session, current_user, page, limit))


@router.post(
    "",
    response_model=ApiResponse[ReviewRead],
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Review an active product. A second review of the same product is a 409.
    """
    review = service.create_review(session, current_user, payload)
    return success_response(review, "CREATE", status.HTTP_201_CREATED)


@router.get("/{review_id}", response_model=ApiResponse[ReviewRead])
def get_review(
    review_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return success_response(service.get_mine(session, current_user, review_id))


@router.patch("/{review_id}", response_model=ApiResponse[ReviewRead])
def update_review(
    review_id: uuid.UUID,
    payload: ReviewUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    review = service.update_review(session, current_user, review_id, payload)
    return success_response(review, "UPDATE")


@router.delete("/{review_id}", response_model=ApiResponse)
def delete_review(
    review_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    service.delete_review(session, current_user, review_id)
    return success_response(None, "DELETE")
