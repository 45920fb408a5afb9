# tests/test_cart_service.py
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlmodel import Session, select

from storefront.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from storefront.database import engine
from storefront.models.cart import Cart, CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemCreate
from storefront.services.cart_service import CartOwner, CartService


@pytest.fixture
def cart_service():
    return CartService(CartRepository(), ProductRepository())


def _item_rows(session, cart_id):
    return session.exec(select(CartItem).where(CartItem.cart_id == cart_id)).all()


def test_cart_owner_needs_exactly_one_key():
    with pytest.raises(ValueError):
        CartOwner()
    with pytest.raises(ValueError):
        CartOwner(user_id=uuid.uuid4(), session_id="s-both")


def test_get_cart_without_cart_is_empty_and_not_persisted(session, cart_service):
    cart = cart_service.get_cart(session, CartOwner(session_id="s-empty"))

    assert cart.id is None
    assert cart.items == []
    assert cart.total_items == 0
    assert cart.total_price == 0
    assert session.exec(select(Cart)).all() == []


def test_add_same_variant_twice_increments_single_line(
    session, cart_service, make_product, taxonomy
):
    product = make_product(price=25.0, stock=10)
    owner = CartOwner(session_id="s-variant")
    payload = CartItemCreate(
        product_id=product.id, quantity=2, size_id=taxonomy["size"].id
    )

    cart_service.add_item(session, owner, payload)
    cart = cart_service.add_item(session, owner, payload)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 4
    assert cart.total_items == 4
    assert cart.total_price == 100.0
    assert len(_item_rows(session, cart.id)) == 1


def test_different_variants_are_separate_lines(
    session, cart_service, make_product, taxonomy
):
    product = make_product(price=10.0, stock=10)
    owner = CartOwner(session_id="s-two-variants")

    cart_service.add_item(session, owner, CartItemCreate(product_id=product.id))
    cart = cart_service.add_item(
        session,
        owner,
        CartItemCreate(product_id=product.id, color_id=taxonomy["color"].id),
    )

    assert len(cart.items) == 2
    assert cart.total_items == 2
    assert cart.total_price == 20.0


def test_totals_follow_every_change(session, cart_service, make_product):
    shirt = make_product(name="Shirt", price=30.0, stock=10)
    socks = make_product(name="Socks", price=5.5, stock=10)
    owner = CartOwner(session_id="s-totals")

    cart_service.add_item(session, owner, CartItemCreate(product_id=shirt.id, quantity=2))
    cart = cart_service.add_item(
        session, owner, CartItemCreate(product_id=socks.id, quantity=3)
    )
    assert cart.total_items == 5
    assert cart.total_price == 76.5

    socks_line = next(i for i in cart.items if i.product.id == socks.id)
    cart = cart_service.update_item(session, owner, socks_line.id, 1)
    assert cart.total_items == 3
    assert cart.total_price == 65.5

    cart = cart_service.remove_item(session, owner, socks_line.id)
    assert cart.total_items == 2
    assert cart.total_price == 60.0

    cart = cart_service.clear_cart(session, owner)
    assert cart.items == []
    assert cart.total_items == 0
    assert cart.total_price == 0


def test_snapshot_price_is_kept_after_catalog_change(session, cart_service, make_product):
    product = make_product(price=40.0, stock=10)
    owner = CartOwner(session_id="s-snapshot")
    cart_service.add_item(session, owner, CartItemCreate(product_id=product.id))

    product.price = 55.0
    session.add(product)
    session.commit()

    cart = cart_service.add_item(session, owner, CartItemCreate(product_id=product.id))
    assert cart.items[0].price == 40.0
    assert cart.items[0].product.price == 55.0
    assert cart.total_price == 80.0


def test_add_more_than_stock_is_rejected(session, cart_service, make_product):
    product = make_product(stock=3)
    owner = CartOwner(session_id="s-stock")

    with pytest.raises(ValidationError):
        cart_service.add_item(session, owner, CartItemCreate(product_id=product.id, quantity=4))

    cart_service.add_item(session, owner, CartItemCreate(product_id=product.id, quantity=2))
    with pytest.raises(ValidationError):
        cart_service.add_item(session, owner, CartItemCreate(product_id=product.id, quantity=2))

    cart = cart_service.get_cart(session, owner)
    assert cart.total_items == 2


def test_inactive_or_unknown_product_is_not_found(session, cart_service, make_product):
    hidden = make_product(is_active=False)
    owner = CartOwner(session_id="s-missing")

    with pytest.raises(NotFoundError):
        cart_service.add_item(session, owner, CartItemCreate(product_id=hidden.id))


def test_update_someone_elses_line_is_forbidden(session, cart_service, make_product):
    product = make_product(stock=5)
    alice = CartOwner(session_id="s-alice")
    bob = CartOwner(session_id="s-bob")

    cart = cart_service.add_item(session, alice, CartItemCreate(product_id=product.id))
    cart_service.add_item(session, bob, CartItemCreate(product_id=product.id))

    with pytest.raises(AuthorizationError):
        cart_service.update_item(session, bob, cart.items[0].id, 2)
    with pytest.raises(AuthorizationError):
        cart_service.remove_item(session, bob, cart.items[0].id)


def test_merge_moves_guest_lines_and_deletes_guest_cart(
    session, cart_service, make_user, make_product
):
    customer = make_user()
    product = make_product(price=100.0, stock=10)
    cart_service.add_item(
        session, CartOwner(session_id="s1"), CartItemCreate(product_id=product.id, quantity=2)
    )

    merged = cart_service.merge_guest_cart_into_user(session, "s1", customer.id)

    assert merged is not None
    assert merged.user_id == customer.id
    assert merged.total_items == 2
    assert merged.total_price == 200.0
    assert len(merged.items) == 1
    assert session.exec(select(Cart).where(Cart.session_id == "s1")).first() is None


def test_merge_sums_matching_lines_and_keeps_customer_price(
    session, cart_service, make_user, make_product
):
    customer = make_user()
    product = make_product(price=10.0, stock=20)
    user_owner = CartOwner(user_id=customer.id)

    cart_service.add_item(session, user_owner, CartItemCreate(product_id=product.id, quantity=1))

    product.price = 12.0
    session.add(product)
    session.commit()
    cart_service.add_item(
        session, CartOwner(session_id="s-sum"), CartItemCreate(product_id=product.id, quantity=3)
    )

    merged = cart_service.merge_guest_cart_into_user(session, "s-sum", customer.id)

    assert len(merged.items) == 1
    assert merged.items[0].quantity == 4
    assert merged.items[0].price == 10.0
    assert merged.total_price == 40.0


def test_merge_twice_is_a_no_op(session, cart_service, make_user, make_product):
    customer = make_user()
    product = make_product(price=100.0, stock=10)
    cart_service.add_item(
        session, CartOwner(session_id="s-replay"), CartItemCreate(product_id=product.id, quantity=2)
    )

    first = cart_service.merge_guest_cart_into_user(session, "s-replay", customer.id)
    second = cart_service.merge_guest_cart_into_user(session, "s-replay", customer.id)

    assert first.total_items == 2
    assert second is None
    cart = cart_service.get_cart(session, CartOwner(user_id=customer.id))
    assert cart.total_items == 2
    assert cart.total_price == 200.0


def test_merge_without_guest_cart_returns_none(session, cart_service, make_user):
    customer = make_user()
    assert cart_service.merge_guest_cart_into_user(session, "never-used", customer.id) is None


def test_one_cart_per_owner_across_sessions(cart_service, make_product):
    product = make_product(stock=10)
    owner = CartOwner(session_id="s-shared")

    with Session(engine) as first, Session(engine) as second:
        a = cart_service.get_or_create_cart(first, owner)
        first.commit()
        b = cart_service.get_or_create_cart(second, owner)
        second.commit()
        assert a.id == b.id

    with Session(engine) as check:
        carts = check.exec(select(Cart).where(Cart.session_id == "s-shared")).all()
        assert len(carts) == 1


def test_concurrent_adds_share_one_guest_cart(cart_service, make_product):
    product_id = make_product(price=5.0, stock=50).id
    owner = CartOwner(session_id="s-race")

    def add(_):
        with Session(engine) as s:
            cart_service.add_item(s, owner, CartItemCreate(product_id=product_id, quantity=1))

    with ThreadPoolExecutor(max_workers=5) as pool:
        list(pool.map(add, range(10)))

    with Session(engine) as check:
        carts = check.exec(select(Cart).where(Cart.session_id == "s-race")).all()
        assert len(carts) == 1
        assert carts[0].total_items == 10
        assert carts[0].total_price == 50.0
        assert len(_item_rows(check, carts[0].id)) == 1


def test_concurrent_merges_apply_once(cart_service, make_user, make_product):
    customer_id = make_user().id
    product_id = make_product(price=100.0, stock=10).id
    with Session(engine) as s:
        cart_service.add_item(
            s, CartOwner(session_id="s-login-race"), CartItemCreate(product_id=product_id, quantity=2)
        )

    def merge(_):
        with Session(engine) as s:
            return cart_service.merge_guest_cart_into_user(s, "s-login-race", customer_id)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(merge, range(8)))

    assert sum(result is not None for result in results) == 1
    with Session(engine) as check:
        cart = cart_service.get_cart(check, CartOwner(user_id=customer_id))
        assert cart.total_items == 2
        assert cart.total_price == 200.0
        assert check.exec(select(Cart).where(Cart.session_id == "s-login-race")).all() == []


def test_deactivated_product_stays_in_cart_view(session, cart_service, make_product):
    product = make_product(price=30.0, stock=5)
    owner = CartOwner(session_id="s-retired")
    cart_service.add_item(session, owner, CartItemCreate(product_id=product.id, quantity=2))

    product.is_active = False
    session.add(product)
    session.commit()

    cart = cart_service.get_cart(session, owner)
    assert [item.product.id for item in cart.items] == [product.id]
    assert cart.total_items == 2
    assert cart.total_price == 60.0
