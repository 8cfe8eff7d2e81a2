"""
Payment gateway client for card tokenization.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import Settings
from .exceptions import PaymentDeclinedException
from .schemas import CreditCardInput

# Set up logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GatewayCard:
    """Result of a successful tokenization."""
    card_type: Optional[str]
    token: str
    masked_number: str


def mask_card_number(number: str) -> str:
    """
    Return a display form of a card number.

    Numbers the gateway already masked are returned as-is; a bare run of
    digits keeps only its last four.
    """
    if number.isdigit():
        return "x" * (len(number) - 4) + number[-4:]
    return number


class PaymentGateway:
    """
    Tokenizes raw card input with the gateway's REST API.

    Declines, HTTP errors and timeouts all surface as
    PaymentDeclinedException. No retries are attempted.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.payment_gateway_url.rstrip("/")
        self.api_key = settings.payment_gateway_api_key
        self.api_pin = settings.payment_gateway_api_pin
        self.timeout = settings.payment_gateway_timeout
        self.transport = transport

    async def tokenize(self, card: CreditCardInput) -> GatewayCard:
        """
        Exchange raw card details for a reusable gateway token.

        Args:
            card: Raw card input

        Returns:
            GatewayCard: Card type, token and masked number

        Raises:
            PaymentDeclinedException: If the gateway declines, cannot be reached
                or answers with a body that carries no usable token
        """
        payload = {"creditcard": card.model_dump(exclude_none=True)}
        auth = httpx.BasicAuth(self.api_key or "", self.api_pin or "")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, auth=auth, transport=self.transport) as client:
                response = await client.post(f"{self.api_url}/tokens", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Card tokenization declined with status {e.response.status_code}")
            raise PaymentDeclinedException()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Card tokenization failed: {str(e)}")
            raise PaymentDeclinedException()

        if not isinstance(data, dict):
            logger.error(f"Card tokenization failed: unexpected response body of type {type(data).__name__}")
            raise PaymentDeclinedException()

        creditcard = data.get("creditcard") or {}
        if not isinstance(creditcard, dict):
            logger.error("Card tokenization failed: creditcard field is not an object")
            raise PaymentDeclinedException()

        token = data.get("key")
        masked_number = creditcard.get("number") or data.get("cardnumber")
        if not isinstance(token, str) or not isinstance(masked_number, str) or not token or not masked_number:
            logger.warning(f"Card tokenization declined: {data.get('error') or 'no token returned'}")
            raise PaymentDeclinedException()

        return GatewayCard(
            card_type=creditcard.get("card_type") or data.get("type"),
            token=token,
            masked_number=mask_card_number(masked_number)
        )
