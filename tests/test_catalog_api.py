# tests/test_catalog_api.py
API = "/api/v1"


def test_taxonomy_writes_are_admin_only(client, make_user, auth_headers):
    customer = make_user()

    anonymous = client.post(f"{API}/catalog/categories", json={"name": "Shoes"})
    assert anonymous.status_code == 401

    res = client.post(
        f"{API}/catalog/categories", headers=auth_headers(customer), json={"name": "Shoes"}
    )
    assert res.status_code == 403


def test_taxonomy_crud(client, make_user, auth_headers):
    headers = auth_headers(make_user(role="admin"))

    created = client.post(f"{API}/catalog/brands", headers=headers, json={"name": "Northwind"})
    assert created.status_code == 201
    brand = created.json()["data"]

    listed = client.get(f"{API}/catalog/brands").json()["data"]
    assert [b["name"] for b in listed] == ["Northwind"]

    renamed = client.patch(
        f"{API}/catalog/brands/{brand['id']}", headers=headers, json={"name": "Southwind"}
    )
    assert renamed.json()["data"]["name"] == "Southwind"

    hidden = client.patch(
        f"{API}/catalog/brands/{brand['id']}", headers=headers, json={"is_active": False}
    )
    assert hidden.status_code == 200
    assert client.get(f"{API}/catalog/brands").json()["data"] == []
    assert client.get(f"{API}/catalog/brands/{brand['id']}").status_code == 404

    deleted = client.delete(f"{API}/catalog/brands/{brand['id']}", headers=headers)
    assert deleted.status_code == 200


def test_duplicate_name_conflicts(client, make_user, auth_headers):
    headers = auth_headers(make_user(role="admin"))

    assert client.post(f"{API}/catalog/tags", headers=headers, json={"name": "summer"}).status_code == 201
    res = client.post(f"{API}/catalog/tags", headers=headers, json={"name": "summer"})

    assert res.status_code == 409
    assert res.json()["error"] == "Tag already exists"


def test_same_size_label_in_two_systems(client, make_user, auth_headers):
    headers = auth_headers(make_user(role="admin"))

    first = client.post(f"{API}/catalog/sizes", headers=headers, json={"name": "8", "type": "shoes"})
    second = client.post(f"{API}/catalog/sizes", headers=headers, json={"name": "8", "type": "rings"})
    again = client.post(f"{API}/catalog/sizes", headers=headers, json={"name": "8", "type": "shoes"})

    assert first.status_code == 201
    assert second.status_code == 201
    assert again.status_code == 409


def test_color_hex_code_is_validated(client, make_user, auth_headers):
    headers = auth_headers(make_user(role="admin"))

    bad = client.post(f"{API}/catalog/colors", headers=headers, json={"name": "Teal", "hex_code": "teal"})
    assert bad.status_code == 400

    ok = client.post(f"{API}/catalog/colors", headers=headers, json={"name": "Teal", "hex_code": "#00aaaa"})
    assert ok.json()["data"]["hex_code"] == "#00AAAA"


def test_entry_in_use_cannot_be_deleted(client, make_user, auth_headers, make_product, taxonomy):
    headers = auth_headers(make_user(role="admin"))
    make_product()

    res = client.delete(f"{API}/catalog/categories/{taxonomy['category'].id}", headers=headers)

    assert res.status_code == 409
    assert client.get(f"{API}/catalog/categories/{taxonomy['category'].id}").status_code == 200


def test_tag_in_use_cannot_be_deleted(client, make_user, auth_headers, taxonomy):
    admin_headers = auth_headers(make_user(role="admin"))
    seller_headers = auth_headers(make_user(role="seller"))
    tag = client.post(f"{API}/catalog/tags", headers=admin_headers, json={"name": "linen"}).json()["data"]

    created = client.post(
        f"{API}/products",
        headers=seller_headers,
        json={
            "name": "Linen shirt",
            "price": 49.9,
            "stock": 3,
            "category_id": str(taxonomy["category"].id),
            "brand_id": str(taxonomy["brand"].id),
            "tag_ids": [tag["id"]],
        },
    )
    assert created.status_code == 201
    assert created.json()["data"]["tag_ids"] == [tag["id"]]

    res = client.delete(f"{API}/catalog/tags/{tag['id']}", headers=admin_headers)
    assert res.status_code == 409
