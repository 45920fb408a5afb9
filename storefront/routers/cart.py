# storefront/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import get_cart_owner, require_customer
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartMergeRead,
    CartMergeRequest,
    CartRead,
)
from storefront.services.cart_service import CartOwner, CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=ApiResponse[CartRead])
def get_my_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Get the current cart.

    Auth:
      - customer (bearer token), or
      - guest (X-Session-Id header)
    """
    return success_response(service.get_cart(session, owner))


@router.post(
    "/items",
    response_model=ApiResponse[CartRead],
    status_code=status.HTTP_201_CREATED,
)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Add a product variant to the cart (creates the cart on first use).

    Returns the updated cart.
    """
    cart = service.add_item(session, owner, payload)
    return success_response(cart, "CREATE", status.HTTP_201_CREATED)


@router.patch("/items/{item_id}", response_model=ApiResponse[CartRead])
def update_cart_item(
    item_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    cart = service.update_item(session, owner, item_id, payload.quantity)
    return success_response(cart, "UPDATE")


@router.delete("/items/{item_id}", response_model=ApiResponse[CartRead])
def remove_cart_item(
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    cart = service.remove_item(session, owner, item_id)
    return success_response(cart, "DELETE")


@router.delete("", response_model=ApiResponse[CartRead])
def clear_cart(
    session: Session = Depends(get_session),
    owner: CartOwner = Depends(get_cart_owner),
):
    """
    Clear the entire cart.

    Returns the (now empty) cart.
    """
    return success_response(service.clear_cart(session, owner), "DELETE")


@router.post("/merge", response_model=ApiResponse[CartMergeRead])
def merge_guest_cart(
    payload: CartMergeRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Merge the guest cart of `session_id` into the customer's cart.

    Safe to repeat: once merged, the guest cart is gone and further calls
    report `merged: false` with the unchanged customer cart.
    """
    merged = service.merge_guest_cart_into_user(
        session, payload.session_id, current_user.id
    )
    cart = merged or service.get_cart(session, CartOwner(user_id=current_user.id))
    return success_response(CartMergeRead(merged=merged is not None, cart=cart), "UPDATE")
