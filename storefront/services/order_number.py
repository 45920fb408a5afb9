# storefront/services/order_number.py
"""
Order numbers: ORD-<YYYYMMDD>-<sequence>, UTC date, sequence zero-padded
to at least 4 digits and restarting at 1 every day.

The sequence comes from a per-day counter row bumped with a single
UPDATE ... RETURNING, so two concurrent checkouts can never read the
same value. The unique constraint on orders.order_number stays as the
last line of defence.
"""

from datetime import datetime, timezone

from sqlmodel import Session

from storefront.repositories.order_repo import OrderRepository

ORDER_PREFIX = "ORD"
SEQUENCE_WIDTH = 4

order_repo = OrderRepository()


def day_key(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y%m%d")


def format_order_number(day: str, sequence: int) -> str:
    """format_order_number("20250101", 7) -> "ORD-20250101-0007"."""
    return f"{ORDER_PREFIX}-{day}-{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(order_number: str) -> int:
    """parse_sequence("ORD-20250101-0007") -> 7."""
    return int(order_number.rsplit("-", 1)[1])


def generate_order_number(session: Session, now: datetime | None = None) -> str:
    """
    Reserve the next order number for today inside the caller's transaction.

    The counter never hands out a sequence at or below the highest one
    already used today: numbers issued before the counter existed (or by
    an attempt whose counter bump was rolled back) are skipped.
    """
    day = day_key(now)
    prefix = f"{ORDER_PREFIX}-{day}-"

    last = order_repo.last_number_with_prefix(session, prefix)
    floor = parse_sequence(last) if last else 0

    order_repo.ensure_counter(session, day, floor)
    sequence = order_repo.increment_counter(session, day, floor)
    return format_order_number(day, sequence)
