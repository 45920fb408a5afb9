# tests/test_orders_api.py
import re

API = "/api/v1"


def _fill_cart(client, headers, product, quantity=2):
    res = client.post(
        f"{API}/cart/items",
        headers=headers,
        json={"product_id": str(product.id), "quantity": quantity},
    )
    assert res.status_code == 201


def test_checkout_creates_order_and_empties_cart(
    client, make_user, make_product, auth_headers, shipping
):
    customer = make_user()
    headers = auth_headers(customer)
    product = make_product(price=100.0, stock=10)
    _fill_cart(client, headers, product)

    res = client.post(
        f"{API}/orders/checkout", headers=headers, json={"shipping_address": shipping}
    )

    assert res.status_code == 201
    order = res.json()["data"]
    assert re.match(r"^ORD-\d{8}-0001$", order["order_number"])
    assert order["total_amount"] == 200.0
    assert order["order_status"] == "pending"
    assert order["payment_method"] == "COD"
    assert order["items"][0]["quantity"] == 2

    cart = client.get(f"{API}/cart", headers=headers).json()["data"]
    assert cart["items"] == []
    assert cart["total_items"] == 0

    product_view = client.get(f"{API}/products/{product.id}").json()["data"]
    assert product_view["stock"] == 8


def test_checkout_with_empty_cart_is_rejected(client, make_user, auth_headers, shipping):
    customer = make_user()
    res = client.post(
        f"{API}/orders/checkout",
        headers=auth_headers(customer),
        json={"shipping_address": shipping},
    )
    assert res.status_code == 400


def test_checkout_needs_an_address(client, make_user, auth_headers):
    customer = make_user()
    res = client.post(f"{API}/orders/checkout", headers=auth_headers(customer), json={})
    assert res.status_code == 400


def test_checkout_with_saved_address(client, make_user, make_product, auth_headers, shipping):
    customer = make_user()
    headers = auth_headers(customer)
    product = make_product(stock=5)
    address = client.post(f"{API}/addresses", headers=headers, json=shipping).json()["data"]
    _fill_cart(client, headers, product, quantity=1)

    res = client.post(
        f"{API}/orders/checkout", headers=headers, json={"address_id": address["id"]}
    )

    assert res.status_code == 201
    assert res.json()["data"]["shipping_address"]["city"] == "Bengaluru"


def test_direct_order_with_unknown_product(client, make_user, auth_headers, shipping):
    customer = make_user()
    res = client.post(
        f"{API}/orders",
        headers=auth_headers(customer),
        json={
            "items": [{"product_id": "00000000-0000-0000-0000-000000000001", "quantity": 1}],
            "shipping_address": shipping,
        },
    )
    assert res.status_code == 404


def test_only_cod_is_accepted(client, make_user, make_product, auth_headers, shipping):
    customer = make_user()
    product = make_product()
    res = client.post(
        f"{API}/orders",
        headers=auth_headers(customer),
        json={
            "items": [{"product_id": str(product.id), "quantity": 1}],
            "shipping_address": shipping,
            "payment_method": "CARD",
        },
    )
    assert res.status_code == 400


def test_customer_sees_only_own_orders(
    client, make_user, make_product, auth_headers, shipping
):
    alice, bob = make_user(), make_user()
    product = make_product(stock=10)
    payload = {
        "items": [{"product_id": str(product.id), "quantity": 1}],
        "shipping_address": shipping,
    }
    order = client.post(f"{API}/orders", headers=auth_headers(alice), json=payload).json()["data"]

    mine = client.get(f"{API}/orders", headers=auth_headers(alice)).json()["data"]
    assert [o["id"] for o in mine["orders"]] == [order["id"]]
    assert mine["pagination"]["total"] == 1

    theirs = client.get(f"{API}/orders", headers=auth_headers(bob)).json()["data"]
    assert theirs["orders"] == []

    peek = client.get(f"{API}/orders/{order['id']}", headers=auth_headers(bob))
    assert peek.status_code == 404


def test_admin_and_seller_move_order_status(
    client, make_user, make_product, auth_headers, shipping
):
    admin = make_user(role="admin")
    seller = make_user(role="seller")
    stranger = make_user(role="seller")
    customer = make_user()
    product = make_product(seller=seller, stock=10)
    order = client.post(
        f"{API}/orders",
        headers=auth_headers(customer),
        json={
            "items": [{"product_id": str(product.id), "quantity": 1}],
            "shipping_address": shipping,
        },
    ).json()["data"]

    forbidden = client.patch(
        f"{API}/sellers/orders/{order['id']}/status",
        headers=auth_headers(stranger),
        json={"status": "confirmed"},
    )
    assert forbidden.status_code == 403

    confirmed = client.patch(
        f"{API}/sellers/orders/{order['id']}/status",
        headers=auth_headers(seller),
        json={"status": "confirmed"},
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["data"]["order_status"] == "confirmed"

    illegal = client.patch(
        f"{API}/admin/orders/{order['id']}/status",
        headers=auth_headers(admin),
        json={"status": "delivered"},
    )
    assert illegal.status_code == 400

    cancelled = client.patch(
        f"{API}/admin/orders/{order['id']}/status",
        headers=auth_headers(admin),
        json={"status": "cancelled"},
    )
    assert cancelled.json()["data"]["order_status"] == "cancelled"
    assert client.get(f"{API}/products/{product.id}").json()["data"]["stock"] == 10

    seller_orders = client.get(f"{API}/sellers/me/orders", headers=auth_headers(seller))
    assert seller_orders.json()["data"]["pagination"]["total"] == 1


def test_unknown_status_value_is_a_validation_error(client, make_user, auth_headers):
    admin = make_user(role="admin")
    res = client.patch(
        f"{API}/admin/orders/00000000-0000-0000-0000-000000000001/status",
        headers=auth_headers(admin),
        json={"status": "teleported"},
    )
    assert res.status_code == 400


def test_deleting_account_keeps_past_orders(
    client, make_user, make_product, auth_headers, shipping
):
    admin = make_user(role="admin")
    customer = make_user()
    product = make_product(stock=5)
    order = client.post(
        f"{API}/orders",
        headers=auth_headers(customer),
        json={
            "items": [{"product_id": str(product.id), "quantity": 1}],
            "shipping_address": shipping,
        },
    ).json()["data"]

    assert client.delete(f"{API}/users/me", headers=auth_headers(customer)).status_code == 200

    kept = client.get(f"{API}/admin/orders/{order['id']}", headers=auth_headers(admin))
    assert kept.status_code == 200
    customers = client.get(f"{API}/admin/customers", headers=auth_headers(admin)).json()["data"]
    assert customers["users"][0]["email"] == f"deleted-{customer.id}@accounts.invalid"
