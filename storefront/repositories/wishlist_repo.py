# storefront/repositories/wishlist_repo.py
import uuid

from sqlalchemy import delete
from sqlmodel import Session, select, func

from storefront.models.wishlist import Wishlist, WishlistItem


class WishlistRepository:
    """Data access layer for wishlists and wishlist_items (no commits)."""

    # ---- Wishlists ----

    def list_for_customer(
        self, session: Session, customer_id: uuid.UUID
    ) -> list[Wishlist]:
        stmt = (
            select(Wishlist)
            .where(Wishlist.customer_id == customer_id)
            .order_by(Wishlist.is_default.desc(), Wishlist.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_for_customer(
        self, session: Session, customer_id: uuid.UUID, wishlist_id: uuid.UUID
    ) -> Wishlist | None:
        stmt = select(Wishlist).where(
            Wishlist.id == wishlist_id, Wishlist.customer_id == customer_id
        )
        return session.exec(stmt).first()

    def get_default(self, session: Session, customer_id: uuid.UUID) -> Wishlist | None:
        stmt = select(Wishlist).where(
            Wishlist.customer_id == customer_id, Wishlist.is_default == True  # noqa: E712
        )
        return session.exec(stmt).first()

    def add(self, session: Session, wishlist: Wishlist) -> Wishlist:
        session.add(wishlist)
        session.flush()
        return wishlist

    def delete(self, session: Session, wishlist: Wishlist) -> None:
        session.exec(delete(WishlistItem).where(WishlistItem.wishlist_id == wishlist.id))
        session.delete(wishlist)

    # ---- Items ----

    def list_items(self, session: Session, wishlist_id: uuid.UUID) -> list[WishlistItem]:
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.wishlist_id == wishlist_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return session.exec(stmt).all()

    def count_items(self, session: Session, wishlist_id: uuid.UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(WishlistItem)
            .where(WishlistItem.wishlist_id == wishlist_id)
        )
        return session.exec(stmt).one()

    def get_item(
        self, session: Session, wishlist_id: uuid.UUID, item_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.id == item_id, WishlistItem.wishlist_id == wishlist_id
        )
        return session.exec(stmt).first()

    def add_item(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.flush()
        return item

    def delete_item(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
