"""
Credit card service - saving and listing a user's cards.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..auth.dependencies import RequestContext
from ..auth.service import validate_user
from ..core.active_records import ActiveRecordCoordinator
from .gateway import PaymentGateway
from .models import CreditCard
from .schemas import CreditCardInput

# Set up logging
logger = logging.getLogger(__name__)

card_records = ActiveRecordCoordinator(CreditCard)

async def save_card(
    db: Session,
    ctx: RequestContext,
    card_input: CreditCardInput,
    gateway: PaymentGateway
) -> CreditCard:
    """
    Tokenize a card and make it the user's only active card.

    The gateway is called before anything is written, so a decline leaves
    the user's cards untouched.

    Args:
        db: Database session
        ctx: Request context of the caller
        card_input: Raw card details
        gateway: Payment gateway used for tokenization

    Returns:
        CreditCard: The new active card

    Raises:
        NotAuthenticatedException: If the caller has no session
        UserNotFoundException: If the caller's user no longer exists
        PaymentDeclinedException: If the gateway declines or errors
        PersistenceException: If the card cannot be stored
    """
    user = validate_user(db, ctx)
    saved = await gateway.tokenize(card_input)

    card = card_records.replace_active(db, user.id, {
        "cc_type": saved.card_type,
        "cc_token": saved.token,
        "cc_number": saved.masked_number,
        "cc_expire": card_input.expiration,
    })
    logger.info(f"Card {card.id} saved for user {user.id}")
    return card

def list_cards(db: Session, ctx: RequestContext) -> List[CreditCard]:
    """List the caller's cards, newest first."""
    user = validate_user(db, ctx)
    return (
        db.query(CreditCard)
        .filter(CreditCard.user_id == user.id)
        .order_by(CreditCard.id.desc())
        .all()
    )
