# storefront/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_auth
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
from storefront.schemas.user import PasswordChange, UserRead, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(
    UserRepository(),
    CartRepository(),
    AddressRepository(),
    WishlistRepository(),
    OrderRepository(),
    ProductRepository(),
    ReviewRepository(),
)


# -------- Self profile --------


@router.get("/me", response_model=ApiResponse[UserRead])
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a valid bearer token (any role).
    """
    return success_response(UserRead.model_validate(service.get_me(current_user)))


@router.patch("/me", response_model=ApiResponse[UserRead])
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Currently, only `name` is editable.
    """
    user = service.update_me(session, current_user, payload)
    return success_response(UserRead.model_validate(user), "UPDATE")


@router.post("/me/change-password", response_model=ApiResponse)
def change_password(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.change_password(session, current_user, payload)
    return success_response(None, "UPDATE")


@router.delete("/me", response_model=ApiResponse)
def delete_me(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Delete the account with its cart, addresses and wishlists.
    Past orders are kept.
    """
    service.delete_me(session, current_user)
    return success_response(None, "DELETE")
