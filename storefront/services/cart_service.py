# storefront/services/cart_service.py
import logging
import uuid
from dataclasses import dataclass

from sqlmodel import Session

from storefront.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from storefront.core.retry import RetryableConflict, conflict_retry
from storefront.models.cart import Cart
from storefront.models.catalog import Color, Size
from storefront.models.product import Product
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartProductRead,
    CartRead,
)

logger = logging.getLogger(__name__)

CART_CREATE_ATTEMPTS = 3


@dataclass(frozen=True)
class CartOwner:
    """
    Who a cart belongs to: a registered customer or a guest session token.
    Exactly one of the two is set.
    """

    user_id: uuid.UUID | None = None
    session_id: str | None = None

    def __post_init__(self):
        if (self.user_id is None) == (self.session_id is None):
            raise ValueError("CartOwner needs exactly one of user_id / session_id")

    @property
    def key(self) -> dict:
        if self.user_id is not None:
            return {"user_id": self.user_id}
        return {"session_id": self.session_id}


class CartService:
    """
    Business logic for carts (guest and customer).

    Responsibilities:
      - one cart per owner key (insert-if-absent, never read-then-insert)
      - validate product existence, active flag and stock
      - snapshot price taken from Product.price on first add
      - recompute cart totals in the same transaction as every item change
      - merge a guest cart into a customer's cart at login
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return product

    def _check_variant(
        self,
        session: Session,
        size_id: uuid.UUID | None,
        color_id: uuid.UUID | None,
    ) -> None:
        if size_id is not None and session.get(Size, size_id) is None:
            raise NotFoundError("Size not found")
        if color_id is not None and session.get(Color, color_id) is None:
            raise NotFoundError("Color not found")

    @conflict_retry(CART_CREATE_ATTEMPTS)
    def _insert_and_fetch(self, session: Session, owner: CartOwner) -> Cart:
        self.cart_repo.insert_if_absent(session, **owner.key)
        cart = self.cart_repo.get_by_owner(session, **owner.key)
        if cart is None:
            # Deleted by a concurrent merge between our insert and lookup
            session.rollback()
            raise RetryableConflict("cart disappeared before it could be read")
        return cart

    def _owned_cart(self, session: Session, owner: CartOwner) -> Cart | None:
        return self.cart_repo.get_by_owner(session, **owner.key)

    def _build_view(self, session: Session, cart: Cart) -> CartRead:
        rows = self.cart_repo.list_items_with_products(session, cart.id)

        items: list[CartItemRead] = []
        for item, product in rows:
            items.append(
                CartItemRead(
                    id=item.id,
                    product=CartProductRead(
                        id=product.id,
                        name=product.name,
                        price=product.price,
                        images=product.images or [],
                        stock=product.stock,
                    ),
                    size_id=item.size_id,
                    color_id=item.color_id,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=round(item.quantity * item.price, 2),
                    created_at=item.created_at,
                    updated_at=item.updated_at,
                )
            )

        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            session_id=cart.session_id,
            items=items,
            total_items=cart.total_items,
            total_price=cart.total_price,
        )

    # ---- public operations ----

    def get_or_create_cart(self, session: Session, owner: CartOwner) -> Cart:
        """
        Return the owner's cart, creating it if absent (not committed).

        Concurrent callers for the same new owner key end up with the same
        row: the unique owner column turns the second insert into a no-op.

        Raises:
            ConflictError: the cart kept vanishing (concurrent merges).
        """
        try:
            return self._insert_and_fetch(session, owner)
        except RetryableConflict:
            raise ConflictError("Cart is being modified concurrently, please retry")

    def get_cart(self, session: Session, owner: CartOwner) -> CartRead:
        """
        Read-only view. An owner without a cart gets an empty one
        (nothing is persisted).
        """
        cart = self._owned_cart(session, owner)
        if cart is None:
            return CartRead(user_id=owner.user_id, session_id=owner.session_id)
        return self._build_view(session, cart)

    def add_item(
        self,
        session: Session,
        owner: CartOwner,
        payload: CartItemCreate,
    ) -> CartRead:
        """
        Add a product variant to the owner's cart.

        Rules:
          - product must exist and be active
          - resulting line quantity <= product stock
          - same (product, size, color) => quantity incremented, snapshot kept
        """
        product = self._get_valid_product(session, payload.product_id)
        self._check_variant(session, payload.size_id, payload.color_id)

        price, stock, name = product.price, product.stock, product.name
        if payload.quantity > stock:
            raise ValidationError(f"Only {stock} unit(s) of '{name}' in stock")

        try:
            cart = self.get_or_create_cart(session, owner)
            new_qty = self.cart_repo.upsert_item(
                session,
                cart_id=cart.id,
                product_id=payload.product_id,
                size_id=payload.size_id,
                color_id=payload.color_id,
                quantity=payload.quantity,
                price=price,
            )
            if new_qty > stock:
                session.rollback()
                raise ValidationError(f"Only {stock} unit(s) of '{name}' in stock")

            self.cart_repo.recompute_totals(session, cart)
            session.commit()
        except Exception:
            session.rollback()
            raise

        return self._build_view(session, cart)

    def update_item(
        self,
        session: Session,
        owner: CartOwner,
        item_id: uuid.UUID,
        quantity: int,
    ) -> CartRead:
        """
        Set the quantity of one cart line.

        - 404 if the line does not exist
        - 403 if the line belongs to somebody else's cart
        - 400 if stock is insufficient
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        item = self.cart_repo.get_item(session, item_id)
        if not item:
            raise NotFoundError("Cart item not found")

        cart = self._owned_cart(session, owner)
        if cart is None or item.cart_id != cart.id:
            raise AuthorizationError("Cart item belongs to another cart")

        product = self._get_valid_product(session, item.product_id)
        if quantity > product.stock:
            raise ValidationError(
                f"Only {product.stock} unit(s) of '{product.name}' in stock"
            )

        try:
            self.cart_repo.set_item_quantity(session, item.id, quantity)
            self.cart_repo.recompute_totals(session, cart)
            session.commit()
        except Exception:
            session.rollback()
            raise

        return self._build_view(session, cart)

    def remove_item(
        self,
        session: Session,
        owner: CartOwner,
        item_id: uuid.UUID,
    ) -> CartRead:
        item = self.cart_repo.get_item(session, item_id)
        if not item:
            raise NotFoundError("Cart item not found")

        cart = self._owned_cart(session, owner)
        if cart is None or item.cart_id != cart.id:
            raise AuthorizationError("Cart item belongs to another cart")

        try:
            self.cart_repo.delete_item(session, item.id)
            self.cart_repo.recompute_totals(session, cart)
            session.commit()
        except Exception:
            session.rollback()
            raise

        return self._build_view(session, cart)

    def clear_cart(self, session: Session, owner: CartOwner) -> CartRead:
        cart = self._owned_cart(session, owner)
        if cart is None:
            return CartRead(user_id=owner.user_id, session_id=owner.session_id)

        try:
            self.cart_repo.clear_items(session, cart.id)
            self.cart_repo.recompute_totals(session, cart)
            session.commit()
        except Exception:
            session.rollback()
            raise

        return self._build_view(session, cart)

    def merge_guest_cart_into_user(
        self,
        session: Session,
        session_token: str,
        user_id: uuid.UUID,
    ) -> CartRead | None:
        """
        Fold the guest cart of `session_token` into the customer's cart.

        - matching (product, size, color): quantities are summed and the
          customer's snapshot price is kept
        - other lines are moved over with their own snapshot price
        - the guest cart is deleted and totals recomputed

        The guest cart is deleted (and the delete's row count checked)
        before any line is applied, all inside one transaction, so a
        replayed or concurrent merge finds nothing and changes nothing.

        Returns:
            The merged customer cart, or None if there was no guest cart.
        """
        try:
            user_cart = self.get_or_create_cart(session, CartOwner(user_id=user_id))

            guest = self.cart_repo.get_by_owner(
                session, session_id=session_token, for_update=True
            )
            if guest is None:
                session.rollback()
                return None

            guest_id = guest.id
            lines = [
                (it.product_id, it.size_id, it.color_id, it.quantity, it.price)
                for it in self.cart_repo.list_items(session, guest_id)
            ]

            self.cart_repo.clear_items(session, guest_id)
            if self.cart_repo.delete_cart(session, guest_id) != 1:
                # Another merge got there first
                session.rollback()
                return None

            for product_id, size_id, color_id, quantity, price in lines:
                self.cart_repo.upsert_item(
                    session,
                    cart_id=user_cart.id,
                    product_id=product_id,
                    size_id=size_id,
                    color_id=color_id,
                    quantity=quantity,
                    price=price,
                )

            self.cart_repo.recompute_totals(session, user_cart)
            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Merged guest cart %s (%d line(s)) into cart of user %s",
            guest_id,
            len(lines),
            user_id,
        )
        return self._build_view(session, user_cart)
