# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_customer
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    CheckoutRequest,
    OrderCreate,
    OrderListRead,
    OrderRead,
    OrderStatus,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
address_repo = AddressRepository()
service = OrderService(order_repo, cart_repo, product_repo, address_repo)


# -------- Customer endpoints --------


@router.post(
    "/checkout",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Create an order from the current customer's cart.

    The cart is emptied in the same transaction; on any failure nothing
    is written.
    """
    order = service.checkout_cart(session, current_user.id, payload)
    return success_response(order, "CREATE", status.HTTP_201_CREATED)


@router.post(
    "",
    response_model=ApiResponse[OrderRead],
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Direct checkout: order the given lines at the current catalog price.
    The cart is not touched.
    """
    order = service.create_direct_order(session, current_user.id, payload)
    return success_response(order, "CREATE", status.HTTP_201_CREATED)


@router.get("", response_model=ApiResponse[OrderListRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    """
    List the authenticated customer's orders, newest first.
    """
    orders = service.list_orders(
        session, page, limit, status=status_filter, customer_id=current_user.id
    )
    return success_response(orders)


@router.get("/{order_id}", response_model=ApiResponse[OrderRead])
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Get a single order (with items) belonging to the current customer.
    Someone else's order id answers 404.
    """
    return success_response(
        service.get_customer_order(session, current_user.id, order_id)
    )
