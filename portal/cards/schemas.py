"""
Credit card schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class CreditCardInput(BaseModel):
    """
    Raw card details submitted by the user.

    Passed straight to the payment gateway and never stored.
    """
    cardholder: str
    number: str = Field(..., min_length=12, max_length=19, pattern=r"^\d+$")
    expiration: str = Field(..., pattern=r"^\d{4}$", description="MMYY")
    cvc: Optional[str] = Field(None, pattern=r"^\d{3,4}$")
    avs_street: Optional[str] = None
    avs_postalcode: Optional[str] = None

class CreditCardResponse(BaseModel):
    """Saved card as shown to its owner."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    cc_type: Optional[str] = None
    cc_number: str
    cc_expire: str
    active: bool
    created_at: Optional[datetime] = None
