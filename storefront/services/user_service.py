# storefront/services/user_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.core.security import hash_password, verify_password
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.repositories.user_repo import UserRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.common import Pagination
from storefront.schemas.user import (
    PasswordChange,
    SellerApproval,
    SellerStatusRead,
    UserListRead,
    UserRead,
    UserUpdate,
)

logger = logging.getLogger(__name__)

# Stored instead of a bcrypt hash on retired accounts; never verifies.
UNUSABLE_PASSWORD = "!"


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - self profile (read, rename, change password, delete)
      - admin listings of customers / sellers
      - seller approval workflow
    """

    def __init__(
        self,
        repo: UserRepository,
        cart_repo: CartRepository,
        address_repo: AddressRepository,
        wishlist_repo: WishlistRepository,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
    ):
        self.repo = repo
        self.cart_repo = cart_repo
        self.address_repo = address_repo
        self.wishlist_repo = wishlist_repo
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.review_repo = review_repo

    # ----- Self profile -----

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits.
        Currently, only `name` is editable.
        """
        if payload.name is not None:
            current_user.name = payload.name
        current_user.updated_at = datetime.now(timezone.utc)
        return self.repo.update(session, current_user)

    def change_password(
        self,
        session: Session,
        current_user: User,
        payload: PasswordChange,
    ) -> None:
        if not verify_password(payload.current_password, current_user.password_hash):
            raise ValidationError("Current password is incorrect")
        if payload.new_password == payload.current_password:
            raise ValidationError("New password must differ from the current one")

        current_user.password_hash = hash_password(payload.new_password)
        current_user.updated_at = datetime.now(timezone.utc)
        self.repo.update(session, current_user)
        logger.info("User %s changed password", current_user.id)

    def delete_me(self, session: Session, current_user: User) -> None:
        """
        Remove the account together with its cart, addresses, wishlists and
        reviews.

        Orders are business records and are kept. When orders or products
        still point at the account, the row itself is retired instead of
        deleted: personal data is blanked and the password made unusable.
        """
        user_id = current_user.id
        try:
            cart = self.cart_repo.get_by_owner(session, user_id=user_id)
            if cart is not None:
                self.cart_repo.clear_items(session, cart.id)
                self.cart_repo.delete_cart(session, cart.id)

            self.address_repo.delete_for_user(session, user_id)
            for wishlist in self.wishlist_repo.list_for_customer(session, user_id):
                self.wishlist_repo.delete(session, wishlist)
            self.review_repo.delete_for_user(session, user_id)

            referenced = self.order_repo.count(
                session, customer_id=user_id
            ) or self.product_repo.count(session, only_active=False, seller_id=user_id)

            if referenced:
                current_user.name = "Deleted user"
                current_user.email = f"deleted-{user_id}@accounts.invalid"
                current_user.password_hash = UNUSABLE_PASSWORD
                current_user.updated_at = datetime.now(timezone.utc)
                session.add(current_user)
            else:
                self.repo.delete(session, current_user)

            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info("Account %s deleted (retired=%s)", user_id, bool(referenced))

    # ----- Admin operations -----

    def list_users(
        self,
        session: Session,
        role: str,
        page: int = 1,
        limit: int = 20,
        seller_status: str | None = None,
    ) -> UserListRead:
        """Newest-first page of customers or sellers (admin only)."""
        total = self.repo.count(session, role=role, seller_status=seller_status)
        users = self.repo.list(
            session,
            role=role,
            seller_status=seller_status,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return UserListRead(
            users=[UserRead.model_validate(u) for u in users],
            pagination=Pagination.build(page, limit, total),
        )

    def get_seller(self, session: Session, seller_id: uuid.UUID) -> User:
        user = self.repo.get_by_id(session, seller_id)
        if not user or user.role != "seller":
            raise NotFoundError("Seller not found")
        return user

    def set_seller_approval(
        self,
        session: Session,
        seller_id: uuid.UUID,
        payload: SellerApproval,
    ) -> User:
        """
        Approve or reject a seller (admin only).
        `approved_at` is stamped on approval and cleared on rejection.
        """
        seller = self.get_seller(session, seller_id)
        now = datetime.now(timezone.utc)
        seller.seller_status = payload.status
        seller.approved_at = now if payload.status == "approved" else None
        seller.updated_at = now
        seller = self.repo.update(session, seller)
        logger.info("Seller %s marked %s", seller.id, payload.status)
        return seller

    # ----- Seller -----

    def seller_status(self, seller: User) -> SellerStatusRead:
        return SellerStatusRead(
            seller_id=seller.id,
            status=seller.seller_status or "pending",
            approved_at=seller.approved_at,
        )
