# tests/test_cart_api.py
API = "/api/v1"
PASSWORD = "secret123"


def test_guest_cart_requires_session_header(client):
    res = client.get(f"{API}/cart")
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_guest_cart_flow(client, make_product):
    product = make_product(price=100.0, stock=10)
    headers = {"X-Session-Id": "guest-1"}

    empty = client.get(f"{API}/cart", headers=headers)
    assert empty.status_code == 200
    assert empty.json()["data"]["items"] == []

    added = client.post(
        f"{API}/cart/items",
        headers=headers,
        json={"product_id": str(product.id), "quantity": 2},
    )
    assert added.status_code == 201
    cart = added.json()["data"]
    assert cart["session_id"] == "guest-1"
    assert cart["total_items"] == 2
    assert cart["total_price"] == 200.0

    item_id = cart["items"][0]["id"]
    updated = client.patch(
        f"{API}/cart/items/{item_id}", headers=headers, json={"quantity": 3}
    )
    assert updated.json()["data"]["total_items"] == 3

    removed = client.delete(f"{API}/cart/items/{item_id}", headers=headers)
    assert removed.json()["data"]["total_items"] == 0


def test_add_beyond_stock_is_a_validation_error(client, make_product):
    product = make_product(stock=1)
    res = client.post(
        f"{API}/cart/items",
        headers={"X-Session-Id": "guest-stock"},
        json={"product_id": str(product.id), "quantity": 2},
    )
    assert res.status_code == 400


def test_zero_quantity_is_rejected(client, make_product):
    product = make_product(stock=5)
    res = client.post(
        f"{API}/cart/items",
        headers={"X-Session-Id": "guest-zero"},
        json={"product_id": str(product.id), "quantity": 0},
    )
    assert res.status_code == 400


def test_other_carts_item_is_forbidden(client, make_product):
    product = make_product(stock=5)
    added = client.post(
        f"{API}/cart/items",
        headers={"X-Session-Id": "owner"},
        json={"product_id": str(product.id)},
    )
    item_id = added.json()["data"]["items"][0]["id"]

    res = client.patch(
        f"{API}/cart/items/{item_id}",
        headers={"X-Session-Id": "intruder"},
        json={"quantity": 2},
    )
    assert res.status_code == 403


def test_sellers_have_no_cart(client, make_user, auth_headers):
    seller = make_user(role="seller")
    res = client.get(f"{API}/cart", headers=auth_headers(seller))
    assert res.status_code == 403


def test_login_merges_guest_cart(client, make_user, make_product):
    make_user(email="buyer@mail.com")
    product = make_product(price=100.0, stock=10)
    client.post(
        f"{API}/cart/items",
        headers={"X-Session-Id": "s1"},
        json={"product_id": str(product.id), "quantity": 2},
    )

    res = client.post(
        f"{API}/auth/login",
        json={"email": "buyer@mail.com", "password": PASSWORD, "session_id": "s1"},
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["cart"]["total_items"] == 2
    assert data["cart"]["total_price"] == 200.0

    token = data["access_token"]
    mine = client.get(f"{API}/cart", headers={"Authorization": f"Bearer {token}"})
    assert mine.json()["data"]["total_items"] == 2

    guest = client.get(f"{API}/cart", headers={"X-Session-Id": "s1"})
    assert guest.json()["data"]["items"] == []
    assert guest.json()["data"]["id"] is None


def test_explicit_merge_is_idempotent(client, make_user, make_product, auth_headers):
    customer = make_user()
    product = make_product(price=15.0, stock=10)
    client.post(
        f"{API}/cart/items",
        headers={"X-Session-Id": "s-merge"},
        json={"product_id": str(product.id), "quantity": 3},
    )
    headers = auth_headers(customer)

    first = client.post(f"{API}/cart/merge", headers=headers, json={"session_id": "s-merge"})
    second = client.post(f"{API}/cart/merge", headers=headers, json={"session_id": "s-merge"})

    assert first.json()["data"]["merged"] is True
    assert second.json()["data"]["merged"] is False
    assert second.json()["data"]["cart"]["total_items"] == 3
    assert second.json()["data"]["cart"]["total_price"] == 45.0
