# storefront/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth import LoginRequest, RegisterRequest, TokenRead
from storefront.schemas.user import UserRead
from storefront.services.auth_service import AuthService
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/auth", tags=["Auth"])

cart_service = CartService(CartRepository(), ProductRepository())
service = AuthService(UserRepository(), cart_service)


@router.post(
    "/register",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Create a customer or seller account.

    Sellers need admin approval before they can list products.
    """
    user = service.register(session, payload)
    return success_response(
        UserRead.model_validate(user), "CREATE", status.HTTP_201_CREATED
    )


@router.post("/login", response_model=ApiResponse[TokenRead])
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for a bearer token.

    Pass the guest `session_id` used while browsing anonymously to have
    that cart merged into the customer's cart.
    """
    return success_response(service.login(session, payload))
