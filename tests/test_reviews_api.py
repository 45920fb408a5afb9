# tests/test_reviews_api.py
API = "/api/v1"


def _review(client, headers, product, rating, **extra):
    return client.post(
        f"{API}/reviews",
        headers=headers,
        json={"product_id": str(product.id), "rating": rating, **extra},
    )


def _product_view(client, product):
    return client.get(f"{API}/products/{product.id}").json()["data"]


def test_review_updates_product_rating(client, make_user, make_product, auth_headers):
    product = make_product()
    alice = make_user(name="Alice")

    res = _review(client, auth_headers(alice), product, 4, comment="  Fits well  ")

    assert res.status_code == 201
    review = res.json()["data"]
    assert review["reviewer_name"] == "Alice"
    assert review["comment"] == "Fits well"

    view = _product_view(client, product)
    assert view["average_rating"] == 4.0
    assert view["review_count"] == 1


def test_one_review_per_product(client, make_user, make_product, auth_headers):
    product = make_product()
    headers = auth_headers(make_user())
    _review(client, headers, product, 5)

    again = _review(client, headers, product, 3)

    assert again.status_code == 409
    assert again.json()["error"] == "You have already reviewed this product"
    assert _product_view(client, product)["review_count"] == 1


def test_rating_must_be_one_to_five(client, make_user, make_product, auth_headers):
    product = make_product()
    res = _review(client, auth_headers(make_user()), product, 6)
    assert res.status_code == 400


def test_inactive_product_cannot_be_reviewed(client, make_user, make_product, auth_headers):
    product = make_product(is_active=False)
    res = _review(client, auth_headers(make_user()), product, 5)
    assert res.status_code == 404


def test_only_customers_write_reviews(client, make_user, make_product, auth_headers):
    product = make_product()
    res = _review(client, auth_headers(make_user(role="seller")), product, 5)
    assert res.status_code == 403


def test_product_review_page(client, make_user, make_product, auth_headers):
    product = make_product()
    _review(client, auth_headers(make_user(name="Low")), product, 2)
    _review(client, auth_headers(make_user(name="High")), product, 5)

    page = client.get(
        f"{API}/products/{product.id}/reviews", params={"sort": "highest"}
    ).json()["data"]

    assert [r["reviewer_name"] for r in page["reviews"]] == ["High", "Low"]
    assert page["average_rating"] == 3.5
    assert page["review_count"] == 2
    assert page["rating_stats"] == {"5": 1, "4": 0, "3": 0, "2": 1, "1": 0}
    assert page["pagination"]["total"] == 2

    only_fives = client.get(
        f"{API}/products/{product.id}/reviews", params={"rating": 5}
    ).json()["data"]
    assert [r["rating"] for r in only_fives["reviews"]] == [5]


def test_edit_and_delete_own_review(client, make_user, make_product, auth_headers):
    product = make_product()
    owner = auth_headers(make_user())
    stranger = auth_headers(make_user())
    review = _review(client, owner, product, 5).json()["data"]

    assert client.patch(
        f"{API}/reviews/{review['id']}", headers=stranger, json={"rating": 1}
    ).status_code == 404

    edited = client.patch(f"{API}/reviews/{review['id']}", headers=owner, json={"rating": 3})
    assert edited.json()["data"]["rating"] == 3
    assert _product_view(client, product)["average_rating"] == 3.0

    mine = client.get(f"{API}/reviews", headers=owner).json()["data"]
    assert [r["id"] for r in mine["reviews"]] == [review["id"]]

    assert client.delete(f"{API}/reviews/{review['id']}", headers=stranger).status_code == 404
    assert client.delete(f"{API}/reviews/{review['id']}", headers=owner).status_code == 200

    view = _product_view(client, product)
    assert view["average_rating"] == 0
    assert view["review_count"] == 0
    assert client.get(f"{API}/reviews/{review['id']}", headers=owner).status_code == 404


def test_deleting_account_drops_its_reviews(client, make_user, make_product, auth_headers):
    product = make_product()
    leaving = make_user()
    staying = make_user()
    _review(client, auth_headers(leaving), product, 1)
    _review(client, auth_headers(staying), product, 5)

    assert client.delete(f"{API}/users/me", headers=auth_headers(leaving)).status_code == 200

    view = _product_view(client, product)
    assert view["review_count"] == 1
    assert view["average_rating"] == 5.0
