# storefront/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, update
from sqlmodel import Session, select, func

from storefront.database import dialect_insert
from storefront.models.cart import Cart, CartItem, make_variant_key
from storefront.models.product import Product


class CartRepository:
    """
    Data access layer for carts and cart_items.

    NOTE:
      - No commits here; every cart mutation (item change + totals
        recompute) is one transaction owned by the service.
      - Creation and item increments go through ON CONFLICT statements,
        so concurrent requests for the same owner / variant never create
        duplicates.
    """

    # ---- Carts ----

    def get_by_id(self, session: Session, cart_id: uuid.UUID) -> Cart | None:
        return session.get(Cart, cart_id)

    def get_by_owner(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        session_id: str | None = None,
        for_update: bool = False,
    ) -> Cart | None:
        if user_id is not None:
            stmt = select(Cart).where(Cart.user_id == user_id)
        else:
            stmt = select(Cart).where(Cart.session_id == session_id)
        if for_update:
            stmt = stmt.with_for_update()
        return session.exec(stmt).first()

    def insert_if_absent(
        self,
        session: Session,
        *,
        user_id: uuid.UUID | None = None,
        session_id: str | None = None,
    ) -> None:
        """INSERT a cart for the owner key unless one already exists."""
        key = "user_id" if user_id is not None else "session_id"
        stmt = (
            dialect_insert(session, Cart)
            .values(id=uuid.uuid4(), user_id=user_id, session_id=session_id)
            .on_conflict_do_nothing(index_elements=[key])
        )
        session.exec(stmt)

    def delete_cart(self, session: Session, cart_id: uuid.UUID) -> int:
        """Delete a cart row; returns how many rows went away (0 or 1)."""
        result = session.exec(delete(Cart).where(Cart.id == cart_id))
        return result.rowcount

    def recompute_totals(self, session: Session, cart: Cart) -> Cart:
        """
        Recompute the derived totals from the item rows:
          total_items = sum(quantity)
          total_price = sum(quantity * price)
        """
        session.flush()
        stmt = select(
            func.coalesce(func.sum(CartItem.quantity), 0),
            func.coalesce(func.sum(CartItem.quantity * CartItem.price), 0.0),
        ).where(CartItem.cart_id == cart.id)
        total_items, total_price = session.exec(stmt).one()
        cart.total_items = int(total_items)
        cart.total_price = round(float(total_price), 2)
        cart.updated_at = datetime.now(timezone.utc)
        session.add(cart)
        session.flush()
        return cart

    # ---- Items ----

    def list_items(self, session: Session, cart_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def list_items_with_products(
        self, session: Session, cart_id: uuid.UUID
    ) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.created_at)
        )
        return session.exec(stmt).all()

    def get_item(self, session: Session, item_id: uuid.UUID) -> CartItem | None:
        return session.get(CartItem, item_id)

    def upsert_item(
        self,
        session: Session,
        *,
        cart_id: uuid.UUID,
        product_id: uuid.UUID,
        size_id: uuid.UUID | None,
        color_id: uuid.UUID | None,
        quantity: int,
        price: float,
    ) -> int:
        """
        Add `quantity` of a variant to a cart in one statement.

        - new variant: insert with the given snapshot price
        - existing variant: quantity is incremented, snapshot price kept

        Returns the resulting line quantity.
        """
        now = datetime.now(timezone.utc)
        stmt = dialect_insert(session, CartItem).values(
            id=uuid.uuid4(),
            cart_id=cart_id,
            product_id=product_id,
            size_id=size_id,
            color_id=color_id,
            variant_key=make_variant_key(size_id, color_id),
            quantity=quantity,
            price=price,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["cart_id", "product_id", "variant_key"],
            set_={
                "quantity": CartItem.quantity + stmt.excluded.quantity,
                "updated_at": now,
            },
        ).returning(CartItem.quantity)
        return session.exec(stmt).scalar_one()

    def set_item_quantity(
        self, session: Session, item_id: uuid.UUID, quantity: int
    ) -> None:
        session.exec(
            update(CartItem)
            .where(CartItem.id == item_id)
            .values(quantity=quantity, updated_at=datetime.now(timezone.utc))
        )

    def delete_item(self, session: Session, item_id: uuid.UUID) -> None:
        session.exec(delete(CartItem).where(CartItem.id == item_id))

    def clear_items(self, session: Session, cart_id: uuid.UUID) -> None:
        session.exec(delete(CartItem).where(CartItem.cart_id == cart_id))
