"""
Address schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class AddressInput(BaseModel):
    """Address fields as submitted; compared field by field for deduplication."""
    address_one: str
    address_two: Optional[str] = None
    city: str
    state: str
    zipcode: str
    telephone: Optional[str] = None

class AddressResponse(AddressInput):
    model_config = ConfigDict(from_attributes=True)

    id: int
    active: bool
    created_at: Optional[datetime] = None
