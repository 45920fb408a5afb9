# tests/test_addresses_api.py
API = "/api/v1"


def _defaults(client, headers):
    addresses = client.get(f"{API}/addresses", headers=headers).json()["data"]
    return [a["id"] for a in addresses if a["is_default"]]


def test_first_address_becomes_default(client, make_user, auth_headers, shipping):
    headers = auth_headers(make_user())

    res = client.post(f"{API}/addresses", headers=headers, json=shipping)

    assert res.status_code == 201
    address = res.json()["data"]
    assert address["is_default"] is True
    assert address["country"] == "India"


def test_only_one_default_at_a_time(client, make_user, auth_headers, shipping):
    headers = auth_headers(make_user())
    home = client.post(f"{API}/addresses", headers=headers, json=shipping).json()["data"]
    office = client.post(
        f"{API}/addresses", headers=headers, json={**shipping, "name": "Office", "is_default": True}
    ).json()["data"]

    assert _defaults(client, headers) == [office["id"]]

    client.put(f"{API}/addresses/{home['id']}/default", headers=headers)
    assert _defaults(client, headers) == [home["id"]]

    client.patch(f"{API}/addresses/{office['id']}", headers=headers, json={"is_default": True})
    assert _defaults(client, headers) == [office["id"]]


def test_other_users_address_is_not_found(client, make_user, auth_headers, shipping):
    owner = auth_headers(make_user())
    stranger = auth_headers(make_user())
    address = client.post(f"{API}/addresses", headers=owner, json=shipping).json()["data"]

    assert client.get(f"{API}/addresses/{address['id']}", headers=stranger).status_code == 404
    assert client.delete(f"{API}/addresses/{address['id']}", headers=stranger).status_code == 404
    assert client.delete(f"{API}/addresses/{address['id']}", headers=owner).status_code == 200


def test_blank_required_field_is_rejected(client, make_user, auth_headers, shipping):
    headers = auth_headers(make_user())
    res = client.post(f"{API}/addresses", headers=headers, json={**shipping, "city": "   "})
    assert res.status_code == 400
