# storefront/routers/sellers.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_seller
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.repositories.user_repo import UserRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.order import (
    OrderListRead,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
)
from storefront.schemas.product import ProductListRead
from storefront.schemas.user import SellerStatusRead
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/sellers", tags=["Sellers"])

order_repo = OrderRepository()
product_repo = ProductRepository()
cart_repo = CartRepository()
address_repo = AddressRepository()

user_service = UserService(
    UserRepository(),
    cart_repo,
    address_repo,
    WishlistRepository(),
    order_repo,
    product_repo,
    ReviewRepository(),
)
product_service = ProductService(product_repo)
order_service = OrderService(order_repo, cart_repo, product_repo, address_repo)


@router.get("/me/status", response_model=ApiResponse[SellerStatusRead])
def my_status(current_user: User = Depends(require_seller)):
    """
    Approval state of the calling seller (pending / approved / rejected).
    """
    return success_response(user_service.seller_status(current_user))


@router.get("/me/products", response_model=ApiResponse[ProductListRead])
def my_products(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_seller),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    return success_response(
        product_service.list_for_seller(session, current_user, page, limit)
    )


@router.get("/me/orders", response_model=ApiResponse[OrderListRead])
def my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_seller),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    """
    Orders containing at least one of the seller's products.
    """
    return success_response(
        order_service.list_orders(
            session, page, limit, status=status_filter, seller_id=current_user.id
        )
    )


@router.get(
    "/orders/{order_id}",
    response_model=ApiResponse[OrderRead],
    dependencies=[Depends(require_seller)],
)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return success_response(order_service.get_order(session, order_id))


@router.patch("/orders/{order_id}/status", response_model=ApiResponse[OrderRead])
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_seller),
):
    """
    Sellers may move only orders that contain their products.
    """
    order = order_service.update_status(session, order_id, payload.status, current_user)
    return success_response(order, "UPDATE")
