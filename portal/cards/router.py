"""
Credit card routes.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from ..auth.dependencies import RequestContext, get_request_context
from ..auth.exceptions import AuthException
from ..config import settings
from ..database import get_db
from ..exceptions import AppException
from .exceptions import CardException
from .gateway import PaymentGateway
from .schemas import CreditCardInput, CreditCardResponse
from .service import list_cards, save_card

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

def get_payment_gateway() -> PaymentGateway:
    return PaymentGateway(settings)

@router.post("", response_model=CreditCardResponse, status_code=status.HTTP_201_CREATED, summary="Save Credit Card")
async def save_card_route(
    card_input: CreditCardInput,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway)
):
    """
    Tokenize a card with the payment gateway and make it the caller's active card.

    Earlier cards are kept but deactivated. Only the masked number is returned.
    """
    try:
        return await save_card(db, ctx, card_input, gateway)
    except (AuthException, CardException, AppException):
        raise
    except Exception as e:
        logger.error(f"Unexpected error while saving card: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while saving the card"
        )

@router.get("", response_model=List[CreditCardResponse], summary="List Saved Cards")
def list_cards_route(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """List the caller's saved cards, newest first."""
    return list_cards(db, ctx)
