# storefront/services/order_service.py
import logging
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from storefront.core.retry import RetryableConflict, conflict_retry
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import Pagination
from storefront.schemas.order import (
    CheckoutRequest,
    OrderCreate,
    OrderItemRead,
    OrderListRead,
    OrderRead,
    ShippingAddress,
    ShippingAddressRead,
)
from storefront.services.order_number import generate_order_number
from storefront.services.pricing import FlatRatePricing, PricingPolicy

logger = logging.getLogger(__name__)
settings = get_settings()

SUPPORTED_PAYMENT_METHODS = {"COD"}

# pending -> confirmed -> processing -> shipped -> delivered
# cancelled is reachable until the parcel leaves; delivered/cancelled are final
ORDER_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


@dataclass(frozen=True)
class CheckoutLine:
    """
    One line to be ordered. `price` is the cart snapshot price; None means
    "use the live catalog price".
    """

    product_id: uuid.UUID
    quantity: int
    price: float | None = None
    size_id: uuid.UUID | None = None
    color_id: uuid.UUID | None = None


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - validate lines against the catalog (exists, active, stock)
      - compute subtotal / shipping / tax / total
      - allocate the order number
      - persist order + items, take stock, empty the source cart,
        all in one transaction
      - drive the status state machine (admin / owning seller)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        address_repo: AddressRepository,
        pricing: PricingPolicy | None = None,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.address_repo = address_repo
        self.pricing = pricing or FlatRatePricing.from_settings()

    # -------- Placement --------

    def place_order(
        self,
        session: Session,
        customer_id: uuid.UUID,
        shipping_address: ShippingAddress,
        lines: list[CheckoutLine],
        payment_method: str = "COD",
        notes: str | None = None,
        source_cart_id: uuid.UUID | None = None,
    ) -> OrderRead:
        """
        Create an order from `lines`, all-or-nothing.

        Steps:
          1. Validate lines, payment method and address (no writes yet).
          2. Resolve products; price lines; check stock.
          3. Compute totals through the pricing policy.
          4. In one transaction: order number, Order, OrderItems, stock
             decrement, source cart emptied. Retried on order-number
             collision.

        Raises:
            ValidationError: empty order, bad quantity, unsupported payment,
                incomplete address, insufficient stock.
            NotFoundError: unknown or inactive product.
            ConflictError: no unique order number after the retry budget.
        """
        # 1) Request-level validation
        if not lines:
            raise ValidationError("Order must contain at least one item")
        for line in lines:
            if line.quantity < 1:
                raise ValidationError("Quantity must be at least 1")
        if payment_method not in SUPPORTED_PAYMENT_METHODS:
            raise ValidationError(f"Unsupported payment method: {payment_method}")
        address = self._snapshot_address(shipping_address)

        # 2) Products, prices, stock
        requested = Counter()
        for line in lines:
            requested[line.product_id] += line.quantity

        products = {}
        for product_id in requested:
            product = self.product_repo.get_by_id(session, product_id)
            if not product or not product.is_active:
                raise NotFoundError(f"Product {product_id} not found")
            if requested[product_id] > product.stock:
                raise ValidationError(
                    f"Insufficient stock for '{product.name}' "
                    f"(have {product.stock}, requested {requested[product_id]})"
                )
            products[product_id] = product

        line_fields: list[dict] = []
        subtotal = 0.0
        for line in lines:
            product = products[line.product_id]
            price = product.price if line.price is None else line.price
            subtotal += price * line.quantity
            line_fields.append(
                {
                    "product_id": line.product_id,
                    "seller_id": product.seller_id,
                    "product_name": product.name,
                    "size_id": line.size_id,
                    "color_id": line.color_id,
                    "quantity": line.quantity,
                    "price": price,
                }
            )

        # 3) Totals
        charges = self.pricing.charges(subtotal)
        order_fields = {
            "customer_id": customer_id,
            **address,
            "payment_method": payment_method,
            "payment_status": "pending",
            "order_status": "pending",
            "subtotal": charges.subtotal,
            "shipping_cost": charges.shipping_cost,
            "tax_amount": charges.tax_amount,
            "total_amount": charges.total_amount,
            "notes": notes,
        }

        # 4) Persist
        persist = conflict_retry(get_settings().ORDER_NUMBER_MAX_ATTEMPTS)(self._persist)
        try:
            order_id = persist(
                session, order_fields, line_fields, dict(requested), source_cart_id
            )
        except RetryableConflict:
            logger.error("Gave up allocating an order number for customer %s", customer_id)
            raise ConflictError("Could not allocate a unique order number, please retry")

        return self._get_read(session, order_id)

    def _persist(
        self,
        session: Session,
        order_fields: dict,
        line_fields: list[dict],
        requested: dict[uuid.UUID, int],
        source_cart_id: uuid.UUID | None,
    ) -> uuid.UUID:
        order_number = None
        try:
            order_number = generate_order_number(session)
            order = self.order_repo.create_order(
                session, Order(order_number=order_number, **order_fields)
            )
            order_id = order.id

            self.order_repo.create_items(
                session, [OrderItem(order_id=order_id, **fields) for fields in line_fields]
            )

            for product_id, quantity in requested.items():
                if not self.product_repo.decrement_stock(session, product_id, quantity):
                    raise ValidationError(f"Insufficient stock for product {product_id}")

            if source_cart_id is not None:
                cart = self.cart_repo.get_by_id(session, source_cart_id)
                if cart is not None:
                    self.cart_repo.clear_items(session, cart.id)
                    self.cart_repo.recompute_totals(session, cart)

            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if "order_number" not in str(exc.orig):
                raise
            logger.warning("Order number %s already taken, retrying", order_number)
            raise RetryableConflict(order_number)
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Order %s placed by customer %s (%d line(s), total %.2f)",
            order_number,
            order_fields["customer_id"],
            len(line_fields),
            order_fields["total_amount"],
        )
        return order_id

    def _snapshot_address(self, address: ShippingAddress) -> dict:
        fields = {
            "shipping_name": address.name,
            "shipping_street": address.street,
            "shipping_city": address.city,
            "shipping_state": address.state,
            "shipping_zip_code": address.zip_code,
            "shipping_phone": address.phone,
        }
        missing = [name for name, value in fields.items() if not (value or "").strip()]
        if missing:
            raise ValidationError(
                "Missing shipping address fields: "
                + ", ".join(name.removeprefix("shipping_") for name in missing)
            )
        fields["shipping_country"] = address.country or settings.DEFAULT_COUNTRY
        return fields

    def checkout_cart(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: CheckoutRequest,
    ) -> OrderRead:
        """
        Turn the customer's cart into an order at the cart's snapshot prices.
        The cart is emptied in the same transaction.
        """
        cart = self.cart_repo.get_by_owner(session, user_id=customer_id)
        items = self.cart_repo.list_items(session, cart.id) if cart else []
        if not items:
            raise ValidationError("Cart is empty")

        address = self._resolve_address(session, customer_id, payload)
        lines = [
            CheckoutLine(
                product_id=it.product_id,
                quantity=it.quantity,
                price=it.price,
                size_id=it.size_id,
                color_id=it.color_id,
            )
            for it in items
        ]
        return self.place_order(
            session,
            customer_id,
            address,
            lines,
            payment_method=payload.payment_method,
            notes=payload.notes,
            source_cart_id=cart.id,
        )

    def create_direct_order(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """Order explicit lines at the live catalog price (cart untouched)."""
        lines = [
            CheckoutLine(
                product_id=line.product_id,
                quantity=line.quantity,
                size_id=line.size_id,
                color_id=line.color_id,
            )
            for line in payload.items
        ]
        return self.place_order(
            session,
            customer_id,
            payload.shipping_address,
            lines,
            payment_method=payload.payment_method,
            notes=payload.notes,
        )

    def _resolve_address(
        self,
        session: Session,
        customer_id: uuid.UUID,
        payload: CheckoutRequest,
    ) -> ShippingAddress:
        if payload.address_id is None:
            return payload.shipping_address

        saved = self.address_repo.get_for_user(session, customer_id, payload.address_id)
        if not saved:
            raise NotFoundError("Address not found")
        return ShippingAddress(
            name=saved.name,
            street=saved.street,
            city=saved.city,
            state=saved.state,
            zip_code=saved.zip_code,
            country=saved.country,
            phone=saved.phone,
        )

    # -------- Status --------

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        new_status: str,
        actor: User,
    ) -> OrderRead:
        """
        Move an order along the lifecycle:

          pending    -> confirmed, cancelled
          confirmed  -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered
          delivered, cancelled -> (final)

        Admins may move any order; sellers only orders that contain at
        least one of their items. Cancelling puts every line back in stock.
        A delivered COD order is marked paid.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFoundError("Order not found")

        items = self.order_repo.list_items_for_order(session, order.id)
        if actor.role == "seller":
            if not any(it.seller_id == actor.id for it in items):
                raise AuthorizationError("Order does not contain your products")
        elif actor.role != "admin":
            raise AuthorizationError("Not allowed to change order status")

        current = order.order_status
        if new_status not in ORDER_TRANSITIONS.get(current, set()):
            raise ValidationError(f"Invalid status transition: {current} -> {new_status}")

        values = {"updated_at": datetime.now(timezone.utc)}
        if new_status == "delivered" and order.payment_method == "COD":
            values["payment_status"] = "paid"

        try:
            if not self.order_repo.transition_status(
                session, order.id, current, new_status, **values
            ):
                raise ConflictError("Order status was changed by another request")

            if new_status == "cancelled":
                for it in items:
                    self.product_repo.restore_stock(session, it.product_id, it.quantity)

            session.commit()
        except Exception:
            session.rollback()
            raise

        logger.info(
            "Order %s: %s -> %s by %s %s",
            order.order_number,
            current,
            new_status,
            actor.role,
            actor.id,
        )
        return self._get_read(session, order_id)

    # -------- Queries --------

    def list_orders(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        status: str | None = None,
        customer_id: uuid.UUID | None = None,
        seller_id: uuid.UUID | None = None,
    ) -> OrderListRead:
        """
        Newest-first page of orders.

        - customer_id: only that customer's orders
        - seller_id: only orders containing at least one of the seller's items
        """
        filters = {"customer_id": customer_id, "seller_id": seller_id, "status": status}
        total = self.order_repo.count(session, **filters)
        orders = self.order_repo.list_orders(
            session, skip=(page - 1) * limit, limit=limit, **filters
        )

        items_by_order: dict[uuid.UUID, list[OrderItem]] = {}
        for it in self.order_repo.list_items_for_orders(session, [o.id for o in orders]):
            items_by_order.setdefault(it.order_id, []).append(it)

        return OrderListRead(
            orders=[self._to_read(o, items_by_order.get(o.id, [])) for o in orders],
            pagination=Pagination.build(page, limit, total),
        )

    def get_customer_order(
        self,
        session: Session,
        customer_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Single order of the customer, with items.
        Another customer's order is reported as missing (404).
        """
        order = self.order_repo.get_for_customer(session, order_id, customer_id)
        if not order:
            raise NotFoundError("Order not found")
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._to_read(order, items)

    def get_order(self, session: Session, order_id: uuid.UUID) -> OrderRead:
        """Any order by id (admin / seller)."""
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFoundError("Order not found")
        items = self.order_repo.list_items_for_order(session, order.id)
        return self._to_read(order, items)

    # -------- Helper DTO builder --------

    def _get_read(self, session: Session, order_id: uuid.UUID) -> OrderRead:
        order = self.order_repo.get_by_id(session, order_id)
        items = self.order_repo.list_items_for_order(session, order_id)
        return self._to_read(order, items)

    def _to_read(self, order: Order, items: list[OrderItem]) -> OrderRead:
        return OrderRead(
            id=order.id,
            order_number=order.order_number,
            customer_id=order.customer_id,
            shipping_address=ShippingAddressRead(
                name=order.shipping_name,
                street=order.shipping_street,
                city=order.shipping_city,
                state=order.shipping_state,
                zip_code=order.shipping_zip_code,
                country=order.shipping_country,
                phone=order.shipping_phone,
            ),
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            order_status=order.order_status,
            items=[
                OrderItemRead(
                    id=it.id,
                    product_id=it.product_id,
                    product_name=it.product_name,
                    seller_id=it.seller_id,
                    size_id=it.size_id,
                    color_id=it.color_id,
                    quantity=it.quantity,
                    price=it.price,
                    line_total=round(it.quantity * it.price, 2),
                )
                for it in items
            ],
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            tax_amount=order.tax_amount,
            total_amount=order.total_amount,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
