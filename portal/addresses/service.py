"""
Address service - saving and listing a user's addresses.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..auth.dependencies import RequestContext
from ..auth.service import validate_user
from ..core.active_records import ActiveRecordCoordinator
from .models import ADDRESS_FIELDS, Address
from .schemas import AddressInput

# Set up logging
logger = logging.getLogger(__name__)

address_records = ActiveRecordCoordinator(Address, match_keys=ADDRESS_FIELDS)

async def save_address(db: Session, ctx: RequestContext, address_input: AddressInput) -> Address:
    """
    Make the submitted address the user's only active address.

    An existing address of the user with exactly the same fields is
    reactivated rather than inserted again.

    Raises:
        NotAuthenticatedException: If the caller has no session
        UserNotFoundException: If the caller's user no longer exists
        PersistenceException: If the address cannot be stored
    """
    user = validate_user(db, ctx)
    address = address_records.replace_active(db, user.id, address_input.model_dump())
    logger.info(f"Address {address.id} is now active for user {user.id}")
    return address

def list_addresses(db: Session, ctx: RequestContext) -> List[Address]:
    user = validate_user(db, ctx)
    return (
        db.query(Address)
        .filter(Address.user_id == user.id)
        .order_by(Address.id.desc())
        .all()
    )
