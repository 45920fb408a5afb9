# tests/test_order_number.py
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session, select

from storefront.core.config import get_settings
from storefront.core.exceptions import ConflictError
from storefront.database import engine
from storefront.models.order import Order, OrderCounter
from storefront.repositories.address_repo import AddressRepository
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import ShippingAddress
from storefront.services import order_service as order_service_module
from storefront.services.order_number import (
    day_key,
    format_order_number,
    generate_order_number,
    parse_sequence,
)
from storefront.services.order_service import CheckoutLine, OrderService

ORDER_NUMBER = re.compile(r"^ORD-\d{8}-\d{4,}$")


@pytest.fixture
def order_service():
    return OrderService(
        OrderRepository(), CartRepository(), ProductRepository(), AddressRepository()
    )


def _existing_order(session, customer, order_number):
    order = Order(
        order_number=order_number,
        customer_id=customer.id,
        shipping_name="A",
        shipping_street="B",
        shipping_city="C",
        shipping_state="D",
        shipping_zip_code="E",
        shipping_country="India",
        shipping_phone="F",
        subtotal=10.0,
        total_amount=10.0,
    )
    session.add(order)
    session.commit()
    return order


def test_format_pads_to_four_digits():
    assert format_order_number("20250101", 7) == "ORD-20250101-0007"
    assert format_order_number("20250101", 12345) == "ORD-20250101-12345"
    assert parse_sequence("ORD-20250101-0042") == 42


def test_day_key_uses_utc():
    evening_in_new_york = datetime(2025, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert day_key(evening_in_new_york) == "20250302"


def test_first_number_of_the_day_is_one(session):
    number = generate_order_number(session)
    session.commit()

    assert ORDER_NUMBER.match(number)
    assert number == format_order_number(day_key(), 1)


def test_sequence_continues_after_existing_orders(session, make_user):
    customer = make_user()
    today = day_key()
    for seq in (1, 2, 3):
        _existing_order(session, customer, format_order_number(today, seq))

    number = generate_order_number(session)
    session.commit()

    assert number == format_order_number(today, 4)


def test_counter_catches_up_with_numbers_issued_elsewhere(session, make_user):
    customer = make_user()
    today = day_key()
    session.add(OrderCounter(day=today, value=1))
    session.commit()
    _existing_order(session, customer, format_order_number(today, 5))

    number = generate_order_number(session)
    session.commit()

    assert number == format_order_number(today, 6)


def test_concurrent_checkouts_get_distinct_numbers(
    order_service, make_user, make_product, shipping
):
    customer = make_user()
    product = make_product(price=20.0, stock=100)
    customer_id, product_id = customer.id, product.id

    def place(_):
        with Session(engine) as s:
            order = order_service.place_order(
                s,
                customer_id,
                ShippingAddress(**shipping),
                [CheckoutLine(product_id=product_id, quantity=1)],
            )
            return order.order_number

    with ThreadPoolExecutor(max_workers=6) as pool:
        numbers = list(pool.map(place, range(12)))

    assert len(set(numbers)) == 12
    assert all(ORDER_NUMBER.match(n) for n in numbers)
    assert sorted(parse_sequence(n) for n in numbers) == list(range(1, 13))


def test_two_concurrent_checkouts_after_three_orders(
    session, order_service, make_user, make_product, shipping
):
    customer = make_user()
    product = make_product(price=20.0, stock=10)
    today = day_key()
    for seq in (1, 2, 3):
        _existing_order(session, customer, format_order_number(today, seq))
    customer_id, product_id = customer.id, product.id

    def place(_):
        with Session(engine) as s:
            return order_service.place_order(
                s,
                customer_id,
                ShippingAddress(**shipping),
                [CheckoutLine(product_id=product_id, quantity=1)],
            ).order_number

    with ThreadPoolExecutor(max_workers=2) as pool:
        numbers = sorted(pool.map(place, range(2)))

    assert numbers == [format_order_number(today, 4), format_order_number(today, 5)]


def test_collision_on_write_is_retried(
    session, order_service, make_user, make_product, shipping, monkeypatch
):
    customer = make_user()
    product = make_product(price=20.0, stock=10)
    taken = format_order_number(day_key(), 1)
    _existing_order(session, customer, taken)

    calls = []

    def stale_then_real(s, now=None):
        calls.append(1)
        if len(calls) == 1:
            return taken
        return generate_order_number(s, now)

    monkeypatch.setattr(order_service_module, "generate_order_number", stale_then_real)

    order = order_service.place_order(
        session,
        customer.id,
        ShippingAddress(**shipping),
        [CheckoutLine(product_id=product.id, quantity=2)],
    )

    assert len(calls) == 2
    assert order.order_number == format_order_number(day_key(), 2)
    orders = session.exec(select(Order)).all()
    assert len(orders) == 2
    session.refresh(product)
    assert product.stock == 8


def test_retry_budget_is_read_when_placing(
    session, order_service, make_user, make_product, shipping, monkeypatch
):
    customer = make_user()
    product = make_product(price=20.0, stock=10)
    taken = format_order_number(day_key(), 1)
    _existing_order(session, customer, taken)

    calls = []

    def always_taken(s, now=None):
        calls.append(1)
        return taken

    monkeypatch.setattr(order_service_module, "generate_order_number", always_taken)
    monkeypatch.setattr(get_settings(), "ORDER_NUMBER_MAX_ATTEMPTS", 2)

    with pytest.raises(ConflictError):
        order_service.place_order(
            session,
            customer.id,
            ShippingAddress(**shipping),
            [CheckoutLine(product_id=product.id, quantity=2)],
        )

    assert len(calls) == 2
    assert len(session.exec(select(Order)).all()) == 1
    session.refresh(product)
    assert product.stock == 10
