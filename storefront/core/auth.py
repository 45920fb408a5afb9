# storefront/core/auth.py
import uuid
from typing import Callable

from fastapi import Depends, Header, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from storefront.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ValidationError,
)
from storefront.core.security import decode_access_token
from storefront.database import get_session
from storefront.models.user import User
from storefront.services.cart_service import CartOwner

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the current user from an access token.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (user id).
      3. Load the user; a token for a removed account is rejected.

    Returns:
        User instance if authenticated, else None for guests.

    Raises:
        AuthenticationError(401): token invalid/expired, or user unknown.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials)
    sub = payload.get("sub")
    if not sub:
        raise AuthenticationError("Token missing sub")

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise AuthenticationError("Invalid sub in token")

    user = session.get(User, user_id)
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    Raises:
        AuthenticationError(401): if user is None.
    """
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    """
    Build a dependency that admits only the given roles.

        @router.get("/x", dependencies=[Depends(require_roles("admin"))])
    """

    def dependency(user: User = Depends(require_auth)) -> User:
        if user.role not in roles:
            raise AuthorizationError(
                f"This action requires role: {', '.join(roles)}"
            )
        return user

    return dependency


require_admin = require_roles("admin")
require_customer = require_roles("customer")
require_seller = require_roles("seller")


def require_approved_seller(user: User = Depends(require_seller)) -> User:
    """
    Sellers may write to the catalog only after admin approval.
    """
    if user.seller_status != "approved":
        raise AuthorizationError("Seller account is not approved yet")
    return user


def get_cart_owner(
    user: User | None = Depends(get_current_user),
    x_session_id: str | None = Header(default=None, max_length=128),
    session_id: str | None = Query(default=None, max_length=128),
) -> CartOwner:
    """
    Who the cart request acts for.

    - logged-in customer => their user id
    - guest => session token from the X-Session-Id header (or
      ?session_id=) chosen by the client
    """
    if user is not None:
        if user.role != "customer":
            raise AuthorizationError("Only customers have a cart")
        return CartOwner(user_id=user.id)

    token = (x_session_id or session_id or "").strip()
    if not token:
        raise ValidationError("X-Session-Id header is required for guest carts")
    return CartOwner(session_id=token)
