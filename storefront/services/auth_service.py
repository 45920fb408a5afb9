# storefront/services/auth_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.exceptions import AuthenticationError, ConflictError
from storefront.core.security import create_access_token, hash_password, verify_password
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth import LoginRequest, RegisterRequest, TokenRead
from storefront.schemas.user import UserRead
from storefront.services.cart_service import CartOwner, CartService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-up and login.

    Login hands out a signed access token and, for customers, folds the
    guest cart of the browsing session into their own cart.
    """

    def __init__(self, repo: UserRepository, cart_service: CartService):
        self.repo = repo
        self.cart_service = cart_service

    def register(self, session: Session, payload: RegisterRequest) -> User:
        """
        Create a customer or seller account.

        Sellers start as "pending" and cannot list products until an admin
        approves them.

        Raises:
            ConflictError: email already registered.
        """
        email = payload.email.lower()
        if self.repo.get_by_email(session, email):
            raise ConflictError("Email is already registered")

        user = User(
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            role=payload.role,
            seller_status="pending" if payload.role == "seller" else None,
        )
        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Lost the race against a concurrent sign-up with the same email
            session.rollback()
            raise ConflictError("Email is already registered")

        logger.info("Registered %s %s", user.role, user.id)
        return user

    def login(self, session: Session, payload: LoginRequest) -> TokenRead:
        """
        Check credentials and issue an access token.

        If the caller browsed as a guest and passes its `session_id`, the
        guest cart is merged into the customer's cart exactly here.
        """
        user = self.repo.get_by_email(session, payload.email.lower())
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        token = create_access_token(user.id, user.role)
        user_read = UserRead.model_validate(user)

        cart = None
        if user.role == "customer":
            if payload.session_id:
                cart = self.cart_service.merge_guest_cart_into_user(
                    session, payload.session_id, user.id
                )
            if cart is None:
                cart = self.cart_service.get_cart(session, CartOwner(user_id=user.id))

        logger.info("User %s logged in", user.id)
        return TokenRead(access_token=token, user=user_read, cart=cart)
