# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_approved_seller
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import (
    FeaturedProductsRead,
    FeaturedType,
    ProductCreate,
    ProductListRead,
    ProductRead,
    ProductSort,
    ProductUpdate,
)
from storefront.schemas.review import ProductReviewsRead, ReviewSort
from storefront.services.product_service import ProductService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)
review_service = ReviewService(ReviewRepository(), repo)


# -------- Public endpoints --------


@router.get("", response_model=ApiResponse[ProductListRead])
def list_products(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort: ProductSort = "newest",
    q: str | None = Query(None, max_length=100),
    category_id: uuid.UUID | None = None,
    brand_id: uuid.UUID | None = None,
    tag_id: uuid.UUID | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
):
    """
    Public storefront listing (active products only).

    Filters combine with AND; `q` matches name or description.
    """
    return success_response(
        service.list_public(
            session,
            page,
            limit,
            sort,
            q=q,
            category_id=category_id,
            brand_id=brand_id,
            tag_id=tag_id,
            min_price=min_price,
            max_price=max_price,
        )
    )


@router.get("/featured", response_model=ApiResponse[FeaturedProductsRead])
def list_featured_products(
    session: Session = Depends(get_session),
    type: FeaturedType = "all",
    limit: int = Query(8, ge=1, le=50),
):
    """
    Storefront shelves: top_rated, best_selling, new_arrivals, or all three.
    """
    return success_response(service.list_featured(session, type, limit))


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return success_response(service.get_public(session, product_id))


@router.get("/{product_id}/related", response_model=ApiResponse[list[ProductRead]])
def list_related_products(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    """Active products in the same category or sharing a tag."""
    return success_response(service.list_related(session, product_id, limit))


@router.get("/{product_id}/reviews", response_model=ApiResponse[ProductReviewsRead])
def list_product_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: ReviewSort = "newest",
    rating: int | None = Query(None, ge=1, le=5),
):
    """
    Public reviews of an active product with the per-star distribution.
    """
    return success_response(
        review_service.list_for_product(session, product_id, page, limit, sort, rating)
    )


# -------- Seller endpoints --------


@router.post(
    "",
    response_model=ApiResponse[ProductRead],
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved_seller),
):
    """
    List a new product.

    Auth:
      - approved sellers only; pending/rejected sellers get 403.
    """
    product = service.create_product(session, current_user, payload)
    return success_response(product, "CREATE", status.HTTP_201_CREATED)


@router.patch("/{product_id}", response_model=ApiResponse[ProductRead])
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved_seller),
):
    product = service.update_product(session, current_user, product_id, payload)
    return success_response(product, "UPDATE")


@router.delete("/{product_id}", response_model=ApiResponse[ProductRead])
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_approved_seller),
):
    """
    Take a product off the storefront (soft delete).
    """
    product = service.deactivate_product(session, current_user, product_id)
    return success_response(product, "DELETE")
