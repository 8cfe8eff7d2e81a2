"""
Tests for saving and listing credit cards.
"""
from portal.cards.models import CreditCard

CARDS_URL = "/api/v1/cards"


def _card(number="4111111111111111", **overrides):
    card = {
        "cardholder": "Pat Patient",
        "number": number,
        "expiration": "1230",
        "cvc": "123",
        "avs_street": "1 Main St",
        "avs_postalcode": "62701"
    }
    card.update(overrides)
    return card


def test_save_card_requires_session(client, gateway):
    response = client.post(CARDS_URL, json=_card())

    assert response.status_code == 401
    assert gateway.calls == 0


def test_save_card_returns_masked_number(logged_in_client):
    response = logged_in_client.post(CARDS_URL, json=_card())

    assert response.status_code == 201
    data = response.json()
    assert data["cc_number"] == "xxxxxxxxxxxx1111"
    assert data["cc_expire"] == "1230"
    assert data["active"] is True
    assert "cc_token" not in data
    assert "4111111111111111" not in response.text


def test_only_latest_card_is_active(logged_in_client, db):
    for last_four in ("1111", "2222", "3333"):
        response = logged_in_client.post(CARDS_URL, json=_card("411111111111" + last_four))
        assert response.status_code == 201

    cards = logged_in_client.get(CARDS_URL).json()

    assert len(cards) == 3
    assert [card["active"] for card in cards] == [True, False, False]
    assert cards[0]["cc_number"].endswith("3333")
    assert db.query(CreditCard).filter(CreditCard.active == True).count() == 1  # noqa: E712


def test_declined_card_leaves_existing_cards_untouched(logged_in_client, gateway, db):
    logged_in_client.post(CARDS_URL, json=_card())
    gateway.decline = True

    response = logged_in_client.post(CARDS_URL, json=_card("5500000000000004"))

    assert response.status_code == 402
    cards = db.query(CreditCard).all()
    assert len(cards) == 1
    assert cards[0].active is True


def test_declined_first_card_stores_nothing(logged_in_client, gateway, db):
    gateway.decline = True

    response = logged_in_client.post(CARDS_URL, json=_card())

    assert response.status_code == 402
    assert db.query(CreditCard).count() == 0


def test_card_number_must_be_digits(logged_in_client, gateway):
    response = logged_in_client.post(CARDS_URL, json=_card("4111-1111-1111"))

    assert response.status_code == 422
    assert gateway.calls == 0


def test_cards_are_private_to_their_owner(client, register):
    register("first@clinicmail.com")
    client.post(CARDS_URL, json=_card())

    client.cookies.clear()
    register("second@clinicmail.com")

    assert client.get(CARDS_URL).json() == []
