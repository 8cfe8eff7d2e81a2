"""
Card-specific exceptions.
"""
from fastapi import HTTPException, status

class CardException(HTTPException):
    """Base class for card exceptions."""
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class PaymentDeclinedException(CardException):
    """Exception raised when the gateway declines or fails to tokenize a card."""
    def __init__(self, detail: str = "The card could not be saved"):
        super().__init__(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=detail)
