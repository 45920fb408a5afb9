# storefront/services/wishlist_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.models.catalog import Color, Size
from storefront.models.user import User
from storefront.models.wishlist import Wishlist, WishlistItem
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

logger = logging.getLogger(__name__)

DEFAULT_WISHLIST_NAME = "My Wishlist"


class WishlistService:
    """
    Named wishlists per customer plus one default list.

    - list names are unique per customer
    - a product appears at most once per list
    """

    def __init__(self, repo: WishlistRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    # ---- helpers ----

    def _summary(self, session: Session, wishlist: Wishlist) -> WishlistRead:
        return WishlistRead.model_validate(
            wishlist, update={"item_count": self.repo.count_items(session, wishlist.id)}
        )

    def _detail(self, session: Session, wishlist: Wishlist) -> WishlistDetailRead:
        items = self.repo.list_items(session, wishlist.id)
        return WishlistDetailRead.model_validate(
            wishlist,
            update={
                "item_count": len(items),
                "items": [WishlistItemRead.model_validate(it) for it in items],
            },
        )

    def _get_owned(
        self, session: Session, customer: User, wishlist_id: uuid.UUID
    ) -> Wishlist:
        wishlist = self.repo.get_for_customer(session, customer.id, wishlist_id)
        if not wishlist:
            raise NotFoundError("Wishlist not found")
        return wishlist

    # ---- wishlists ----

    def list_wishlists(self, session: Session, customer: User) -> list[WishlistRead]:
        return [
            self._summary(session, w)
            for w in self.repo.list_for_customer(session, customer.id)
        ]

    def create_wishlist(
        self, session: Session, customer: User, payload: WishlistCreate
    ) -> WishlistRead:
        wishlist = Wishlist(customer_id=customer.id, **payload.model_dump())
        try:
            self.repo.add(session, wishlist)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("A wishlist with this name already exists")
        session.refresh(wishlist)
        return self._summary(session, wishlist)

    def get_wishlist(
        self, session: Session, customer: User, wishlist_id: uuid.UUID
    ) -> WishlistDetailRead:
        return self._detail(session, self._get_owned(session, customer, wishlist_id))

    def update_wishlist(
        self,
        session: Session,
        customer: User,
        wishlist_id: uuid.UUID,
        payload: WishlistUpdate,
    ) -> WishlistRead:
        wishlist = self._get_owned(session, customer, wishlist_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(wishlist, field, value)
        wishlist.updated_at = datetime.now(timezone.utc)
        try:
            session.add(wishlist)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("A wishlist with this name already exists")
        session.refresh(wishlist)
        return self._summary(session, wishlist)

    def delete_wishlist(
        self, session: Session, customer: User, wishlist_id: uuid.UUID
    ) -> None:
        wishlist = self._get_owned(session, customer, wishlist_id)
        self.repo.delete(session, wishlist)
        session.commit()

    def get_or_create_default(
        self, session: Session, customer: User
    ) -> WishlistDetailRead:
        """
        Return the customer's default list, creating it on first use.
        """
        wishlist = self.repo.get_default(session, customer.id)
        if wishlist is None:
            wishlist = Wishlist(
                customer_id=customer.id,
                name=DEFAULT_WISHLIST_NAME,
                is_default=True,
            )
            try:
                self.repo.add(session, wishlist)
                session.commit()
            except IntegrityError:
                # Created by a parallel request
                session.rollback()
                wishlist = self.repo.get_default(session, customer.id)
                if wishlist is None:
                    raise ConflictError(
                        f"A wishlist named '{DEFAULT_WISHLIST_NAME}' already exists"
                    )
            else:
                session.refresh(wishlist)
        return self._detail(session, wishlist)

    # ---- items ----

    def add_item(
        self,
        session: Session,
        customer: User,
        wishlist_id: uuid.UUID,
        payload: WishlistItemCreate,
    ) -> WishlistItemRead:
        wishlist = self._get_owned(session, customer, wishlist_id)

        product = self.product_repo.get_by_id(session, payload.product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        if payload.size_id is not None and session.get(Size, payload.size_id) is None:
            raise NotFoundError("Size not found")
        if payload.color_id is not None and session.get(Color, payload.color_id) is None:
            raise NotFoundError("Color not found")

        item = WishlistItem(wishlist_id=wishlist.id, **payload.model_dump())
        try:
            self.repo.add_item(session, item)
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("Product is already in this wishlist")
        session.refresh(item)
        logger.info("Product %s added to wishlist %s", payload.product_id, wishlist_id)
        return WishlistItemRead.model_validate(item)

    def add_to_default(
        self, session: Session, customer: User, payload: WishlistItemCreate
    ) -> WishlistItemRead:
        default = self.get_or_create_default(session, customer)
        return self.add_item(session, customer, default.id, payload)

    def remove_item(
        self,
        session: Session,
        customer: User,
        wishlist_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> None:
        wishlist = self._get_owned(session, customer, wishlist_id)
        item = self.repo.get_item(session, wishlist.id, item_id)
        if not item:
            raise NotFoundError("Wishlist item not found")
        self.repo.delete_item(session, item)
        session.commit()
