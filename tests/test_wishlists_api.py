# tests/test_wishlists_api.py
API = "/api/v1"


def test_default_wishlist_is_created_once(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    first = client.get(f"{API}/wishlists/default", headers=headers).json()["data"]
    second = client.get(f"{API}/wishlists/default", headers=headers).json()["data"]

    assert first["id"] == second["id"]
    assert first["is_default"] is True
    assert len(client.get(f"{API}/wishlists", headers=headers).json()["data"]) == 1


def test_add_to_default_and_reject_duplicates(client, make_user, make_product, auth_headers):
    headers = auth_headers(make_user())
    product = make_product()

    added = client.post(
        f"{API}/wishlists/default/items",
        headers=headers,
        json={"product_id": str(product.id), "priority": "high"},
    )
    assert added.status_code == 201

    again = client.post(
        f"{API}/wishlists/default/items", headers=headers, json={"product_id": str(product.id)}
    )
    assert again.status_code == 409

    default = client.get(f"{API}/wishlists/default", headers=headers).json()["data"]
    assert default["item_count"] == 1
    assert default["items"][0]["priority"] == "high"


def test_named_lists(client, make_user, make_product, auth_headers):
    headers = auth_headers(make_user())
    product = make_product()

    created = client.post(f"{API}/wishlists", headers=headers, json={"name": "Birthday"})
    assert created.status_code == 201
    wishlist = created.json()["data"]

    duplicate = client.post(f"{API}/wishlists", headers=headers, json={"name": "Birthday"})
    assert duplicate.status_code == 409

    item = client.post(
        f"{API}/wishlists/{wishlist['id']}/items", headers=headers, json={"product_id": str(product.id)}
    ).json()["data"]

    removed = client.delete(f"{API}/wishlists/{wishlist['id']}/items/{item['id']}", headers=headers)
    assert removed.status_code == 200

    renamed = client.patch(f"{API}/wishlists/{wishlist['id']}", headers=headers, json={"name": "Holidays"})
    assert renamed.json()["data"]["name"] == "Holidays"

    assert client.delete(f"{API}/wishlists/{wishlist['id']}", headers=headers).status_code == 200
    assert client.get(f"{API}/wishlists/{wishlist['id']}", headers=headers).status_code == 404


def test_other_customers_list_is_hidden(client, make_user, auth_headers):
    owner = auth_headers(make_user())
    stranger = auth_headers(make_user())
    wishlist = client.post(f"{API}/wishlists", headers=owner, json={"name": "Mine"}).json()["data"]

    assert client.get(f"{API}/wishlists/{wishlist['id']}", headers=stranger).status_code == 404


def test_inactive_product_cannot_be_wished_for(client, make_user, make_product, auth_headers):
    headers = auth_headers(make_user())
    product = make_product(is_active=False)

    res = client.post(
        f"{API}/wishlists/default/items", headers=headers, json={"product_id": str(product.id)}
    )
    assert res.status_code == 404
