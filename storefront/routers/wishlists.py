# storefront/routers/wishlists.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_customer
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistCreate,
    WishlistDetailRead,
    WishlistItemCreate,
    WishlistItemRead,
    WishlistRead,
    WishlistUpdate,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlists", tags=["Wishlists"])

service = WishlistService(WishlistRepository(), ProductRepository())


@router.get("", response_model=ApiResponse[list[WishlistRead]])
def list_wishlists(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return success_response(service.list_wishlists(session, current_user))


@router.post(
    "",
    response_model=ApiResponse[WishlistRead],
    status_code=status.HTTP_201_CREATED,
)
def create_wishlist(
    payload: WishlistCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    wishlist = service.create_wishlist(session, current_user, payload)
    return success_response(wishlist, "CREATE", status.HTTP_201_CREATED)


# -------- Default list --------


@router.get("/default", response_model=ApiResponse[WishlistDetailRead])
def get_default_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    The customer's default wishlist; created on first access.
    """
    return success_response(service.get_or_create_default(session, current_user))


@router.post(
    "/default/items",
    response_model=ApiResponse[WishlistItemRead],
    status_code=status.HTTP_201_CREATED,
)
def add_to_default_wishlist(
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    item = service.add_to_default(session, current_user, payload)
    return success_response(item, "CREATE", status.HTTP_201_CREATED)


# -------- Named lists --------


@router.get("/{wishlist_id}", response_model=ApiResponse[WishlistDetailRead])
def get_wishlist(
    wishlist_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return success_response(service.get_wishlist(session, current_user, wishlist_id))


@router.patch("/{wishlist_id}", response_model=ApiResponse[WishlistRead])
def update_wishlist(
    wishlist_id: uuid.UUID,
    payload: WishlistUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    wishlist = service.update_wishlist(session, current_user, wishlist_id, payload)
    return success_response(wishlist, "UPDATE")


@router.delete("/{wishlist_id}", response_model=ApiResponse)
def delete_wishlist(
    wishlist_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    service.delete_wishlist(session, current_user, wishlist_id)
    return success_response(None, "DELETE")


@router.post(
    "/{wishlist_id}/items",
    response_model=ApiResponse[WishlistItemRead],
    status_code=status.HTTP_201_CREATED,
)
def add_wishlist_item(
    wishlist_id: uuid.UUID,
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    item = service.add_item(session, current_user, wishlist_id, payload)
    return success_response(item, "CREATE", status.HTTP_201_CREATED)


@router.delete("/{wishlist_id}/items/{item_id}", response_model=ApiResponse)
def remove_wishlist_item(
    wishlist_id: uuid.UUID,
    item_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    service.remove_item(session, current_user, wishlist_id, item_id)
    return success_response(None, "DELETE")
