"""
Tests for saving and listing addresses.
"""
from portal.addresses.models import Address

ADDRESSES_URL = "/api/v1/addresses"

HOME = {
    "address_one": "1 Main St",
    "address_two": "Apt 2",
    "city": "Springfield",
    "state": "IL",
    "zipcode": "62701",
    "telephone": "555-0100"
}
WORK = dict(HOME, address_one="9 Office Rd", address_two=None)


def test_save_address_requires_session(client):
    assert client.post(ADDRESSES_URL, json=HOME).status_code == 401


def test_save_address(logged_in_client):
    response = logged_in_client.post(ADDRESSES_URL, json=HOME)

    assert response.status_code == 200
    data = response.json()
    assert data["address_one"] == "1 Main St"
    assert data["active"] is True


def test_same_address_twice_keeps_one_row(logged_in_client, db):
    first = logged_in_client.post(ADDRESSES_URL, json=HOME).json()
    second = logged_in_client.post(ADDRESSES_URL, json=HOME).json()

    assert first["id"] == second["id"]
    assert db.query(Address).count() == 1


def test_switching_back_reactivates_earlier_address(logged_in_client, db):
    home = logged_in_client.post(ADDRESSES_URL, json=HOME).json()
    logged_in_client.post(ADDRESSES_URL, json=WORK)
    again = logged_in_client.post(ADDRESSES_URL, json=HOME).json()

    assert again["id"] == home["id"]
    assert again["active"] is True
    assert db.query(Address).count() == 2

    addresses = {a["address_one"]: a["active"] for a in logged_in_client.get(ADDRESSES_URL).json()}
    assert addresses == {"1 Main St": True, "9 Office Rd": False}


def test_address_differing_in_one_field_is_new(logged_in_client, db):
    logged_in_client.post(ADDRESSES_URL, json=HOME)
    logged_in_client.post(ADDRESSES_URL, json=dict(HOME, zipcode="62702"))

    assert db.query(Address).count() == 2
    assert db.query(Address).filter(Address.active == True).count() == 1  # noqa: E712


def test_missing_required_field_is_rejected(logged_in_client):
    payload = dict(HOME)
    del payload["city"]

    assert logged_in_client.post(ADDRESSES_URL, json=payload).status_code == 422
