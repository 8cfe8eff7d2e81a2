"""
Tests for the payment gateway client against a mocked HTTP transport.
"""
import asyncio
import json

import httpx
import pytest

from portal.cards.exceptions import PaymentDeclinedException
from portal.cards.gateway import PaymentGateway, mask_card_number
from portal.cards.router import get_payment_gateway
from portal.cards.models import CreditCard
from portal.cards.schemas import CreditCardInput
from portal.config import settings
from portal.main import app

CARD = CreditCardInput(
    cardholder="Pat Patient",
    number="4111111111111111",
    expiration="1230",
    cvc="123"
)


def _gateway(handler):
    return PaymentGateway(settings, transport=httpx.MockTransport(handler))


def _respond(status_code, body):
    def handler(request):
        return httpx.Response(status_code, json=body)
    return handler


def _tokenize(handler):
    return asyncio.run(_gateway(handler).tokenize(CARD))


def test_mask_card_number():
    assert mask_card_number("4111111111111111") == "xxxxxxxxxxxx1111"
    assert mask_card_number("XXXXXXXXXXXX1111") == "XXXXXXXXXXXX1111"


def test_tokenize_success():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "key": "tok_abc",
            "creditcard": {"number": "4111111111111111", "card_type": "Visa"}
        })

    card = _tokenize(handler)

    assert card.token == "tok_abc"
    assert card.card_type == "Visa"
    assert card.masked_number == "xxxxxxxxxxxx1111"
    assert seen["url"].endswith("/tokens")
    assert seen["body"]["creditcard"]["number"] == "4111111111111111"


def test_tokenize_keeps_gateway_masked_number():
    card = _tokenize(_respond(200, {"key": "tok_1", "cardnumber": "XXXXXXXXXXXX1111", "type": "MC"}))

    assert card.masked_number == "XXXXXXXXXXXX1111"
    assert card.card_type == "MC"


def test_tokenize_declined_status():
    with pytest.raises(PaymentDeclinedException):
        _tokenize(_respond(400, {"error": "Card declined"}))


def test_tokenize_timeout():
    def handler(request):
        raise httpx.ReadTimeout("gateway too slow", request=request)

    with pytest.raises(PaymentDeclinedException):
        _tokenize(handler)


def test_tokenize_non_json_body():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(PaymentDeclinedException):
        _tokenize(handler)


def test_tokenize_without_key():
    with pytest.raises(PaymentDeclinedException):
        _tokenize(_respond(200, {"creditcard": {"number": "XXXXXXXXXXXX1111"}, "error": "Invalid card"}))


@pytest.mark.parametrize("body", [
    [],
    ["tok_abc"],
    {"key": "tok_abc", "creditcard": "XXXXXXXXXXXX1111"},
    {"key": {"id": "tok_abc"}, "cardnumber": "XXXXXXXXXXXX1111"},
    {"key": "tok_abc", "creditcard": {"number": 4111}},
])
def test_tokenize_malformed_body(body):
    with pytest.raises(PaymentDeclinedException):
        _tokenize(_respond(200, body))


def test_malformed_gateway_body_is_a_decline_over_http(logged_in_client, db):
    app.dependency_overrides[get_payment_gateway] = lambda: _gateway(_respond(200, []))

    response = logged_in_client.post("/api/v1/cards", json={
        "cardholder": "Pat Patient",
        "number": "4111111111111111",
        "expiration": "1230"
    })

    assert response.status_code == 402
    assert db.query(CreditCard).count() == 0
