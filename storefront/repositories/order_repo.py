# storefront/repositories/order_repo.py
import uuid

from sqlalchemy import case, update
from sqlmodel import Session, select, func

from storefront.database import dialect_insert
from storefront.models.order import Order, OrderCounter, OrderItem


class OrderRepository:
    """
    Data access layer for orders, order_items and order_counters.

    NOTE:
      - No commits here; order creation is a multi-step transaction.
        The service is responsible for calling session.commit().
    """

    # ---- Orders ----

    def _filtered(
        self,
        stmt,
        customer_id: uuid.UUID | None = None,
        seller_id: uuid.UUID | None = None,
        status: str | None = None,
    ):
        if customer_id is not None:
            stmt = stmt.where(Order.customer_id == customer_id)
        if seller_id is not None:
            stmt = stmt.where(
                Order.id.in_(
                    select(OrderItem.order_id).where(OrderItem.seller_id == seller_id)
                )
            )
        if status is not None:
            stmt = stmt.where(Order.order_status == status)
        return stmt

    def list_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        **filters,
    ) -> list[Order]:
        stmt = self._filtered(select(Order), **filters)
        stmt = (
            stmt.order_by(Order.created_at.desc(), Order.order_number.desc())
            .offset(skip)
            .limit(limit)
        )
        return session.exec(stmt).all()

    def count(self, session: Session, **filters) -> int:
        stmt = self._filtered(select(func.count()).select_from(Order), **filters)
        return session.exec(stmt).one()

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_for_customer(
        self,
        session: Session,
        order_id: uuid.UUID,
        customer_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(Order.id == order_id, Order.customer_id == customer_id)
        return session.exec(stmt).first()

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing; the flush surfaces an
        order_number collision as IntegrityError right here.
        """
        session.add(order)
        session.flush()
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    def transition_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        current: str,
        new: str,
        **values,
    ) -> bool:
        """
        Compare-and-set the order status. Returns False when the order is
        no longer in `current` (somebody else moved it first).
        """
        stmt = (
            update(Order)
            .where(Order.id == order_id, Order.order_status == current)
            .values(order_status=new, **values)
        )
        return session.exec(stmt).rowcount == 1

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.created_at)
        )
        return session.exec(stmt).all()

    def list_items_for_orders(
        self,
        session: Session,
        order_ids: list[uuid.UUID],
    ) -> list[OrderItem]:
        if not order_ids:
            return []
        stmt = select(OrderItem).where(OrderItem.order_id.in_(order_ids))
        return session.exec(stmt).all()

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        return items

    # ---- Per-day sequence ----

    def last_number_with_prefix(self, session: Session, prefix: str) -> str | None:
        """
        Highest order number starting with `prefix`. Longer numbers sort
        first, so "-10000" beats "-9999".
        """
        stmt = (
            select(Order.order_number)
            .where(Order.order_number.startswith(prefix))
            .order_by(func.length(Order.order_number).desc(), Order.order_number.desc())
            .limit(1)
        )
        return session.exec(stmt).first()

    def ensure_counter(self, session: Session, day: str, seed: int) -> None:
        """Create the day's counter row at `seed` unless it already exists."""
        stmt = (
            dialect_insert(session, OrderCounter)
            .values(day=day, value=seed)
            .on_conflict_do_nothing(index_elements=["day"])
        )
        session.exec(stmt)

    def increment_counter(self, session: Session, day: str, floor: int = 0) -> int:
        """
        Atomically bump the day's counter and return the new value.
        The counter is first raised to `floor` if it lags behind it.
        """
        current = case((OrderCounter.value < floor, floor), else_=OrderCounter.value)
        stmt = (
            update(OrderCounter)
            .where(OrderCounter.day == day)
            .values(value=current + 1)
            .returning(OrderCounter.value)
            .execution_options(synchronize_session=False)
        )
        return session.exec(stmt).scalar_one()
