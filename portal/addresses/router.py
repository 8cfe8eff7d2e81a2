"""
Address routes.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from ..auth.dependencies import RequestContext, get_request_context
from ..auth.exceptions import AuthException
from ..database import get_db
from ..exceptions import AppException
from .schemas import AddressInput, AddressResponse
from .service import list_addresses, save_address

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("", response_model=AddressResponse, summary="Save Address")
async def save_address_route(
    address_input: AddressInput,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Make an address the caller's active address, reusing an identical saved one.
    """
    try:
        return await save_address(db, ctx, address_input)
    except (AuthException, AppException):
        raise
    except Exception as e:
        logger.error(f"Unexpected error while saving address: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while saving the address"
        )

@router.get("", response_model=List[AddressResponse], summary="List Saved Addresses")
def list_addresses_route(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return list_addresses(db, ctx)
