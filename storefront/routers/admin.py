# storefront/routers/admin.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.core.auth import require_admin
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
from storefront.schemas.product import ProductListRead, ProductRead, ProductStatusUpdate
from storefront.schemas.user import SellerApproval, SellerStatus, UserListRead, UserRead
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

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


# -------- Accounts --------


@router.get("/customers", response_model=ApiResponse[UserListRead])
def list_customers(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    return success_response(
        user_service.list_users(session, "customer", page, limit)
    )


@router.get("/sellers", response_model=ApiResponse[UserListRead])
def list_sellers(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: SellerStatus | None = Query(None, alias="status"),
):
    """
    List sellers, optionally only those in a given approval state
    (e.g. ?status=pending for the review queue).
    """
    return success_response(
        user_service.list_users(
            session, "seller", page, limit, seller_status=status_filter
        )
    )


@router.put("/sellers/{seller_id}/approval", response_model=ApiResponse[UserRead])
def set_seller_approval(
    seller_id: uuid.UUID,
    payload: SellerApproval,
    session: Session = Depends(get_session),
):
    seller = user_service.set_seller_approval(session, seller_id, payload)
    return success_response(UserRead.model_validate(seller), "UPDATE")


# -------- Products --------


@router.get("/products", response_model=ApiResponse[ProductListRead])
def list_all_products(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    seller_id: uuid.UUID | None = None,
):
    """
    All products, inactive ones included.
    """
    return success_response(
        product_service.list_all(session, page, limit, seller_id=seller_id)
    )


@router.patch("/products/{product_id}/status", response_model=ApiResponse[ProductRead])
def set_product_status(
    product_id: uuid.UUID,
    payload: ProductStatusUpdate,
    session: Session = Depends(get_session),
):
    product = product_service.set_active(session, product_id, payload.is_active)
    return success_response(product, "UPDATE")


# -------- Orders --------


@router.get("/orders", response_model=ApiResponse[OrderListRead])
def list_all_orders(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    return success_response(
        order_service.list_orders(session, page, limit, status=status_filter)
    )


@router.get("/orders/{order_id}", response_model=ApiResponse[OrderRead])
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
    current_user: User = Depends(require_admin),
):
    """
    Move an order along its lifecycle. Invalid transitions answer 400.
    """
    order = order_service.update_status(session, order_id, payload.status, current_user)
    return success_response(order, "UPDATE")
