"""
Visit service - the per-type draft visit slot.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from ..auth.dependencies import RequestContext
from ..auth.service import validate_user
from ..core.active_records import ActiveRecordCoordinator
from .models import Visit, VisitStatus
from .schemas import VisitInput

# Set up logging
logger = logging.getLogger(__name__)

draft_visits = ActiveRecordCoordinator(
    Visit,
    active_key="status",
    active_value=VisitStatus.TEMPORARY,
    inactive_value=VisitStatus.CANCELLED,
    scope_keys=("type",),
)

async def save_tmp_visit(db: Session, ctx: RequestContext, visit_input: VisitInput) -> Visit:
    """
    Create or overwrite the caller's TEMPORARY visit of the given type.

    Saving the same type again updates the existing draft in place.

    Raises:
        NotAuthenticatedException: If the caller has no session
        UserNotFoundException: If the caller's user no longer exists
        PersistenceException: If the visit cannot be stored
    """
    user = validate_user(db, ctx)
    return draft_visits.upsert_active(db, user.id, visit_input.model_dump())

def list_visits(db: Session, ctx: RequestContext) -> List[Visit]:
    user = validate_user(db, ctx)
    return (
        db.query(Visit)
        .filter(Visit.user_id == user.id)
        .order_by(Visit.id.desc())
        .all()
    )
