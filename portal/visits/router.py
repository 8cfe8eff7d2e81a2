"""
Visit routes.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from ..auth.dependencies import RequestContext, get_request_context
from ..auth.exceptions import AuthException
from ..database import get_db
from ..exceptions import AppException
from .schemas import VisitInput, VisitResponse
from .service import list_visits, save_tmp_visit

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

@router.put("/temporary", response_model=VisitResponse, summary="Save Draft Visit")
async def save_tmp_visit_route(
    visit_input: VisitInput,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    """
    Create or update the caller's draft visit for the given visit type.
    """
    try:
        return await save_tmp_visit(db, ctx, visit_input)
    except (AuthException, AppException):
        raise
    except Exception as e:
        logger.error(f"Unexpected error while saving draft visit: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while saving the visit"
        )

@router.get("", response_model=List[VisitResponse], summary="List Visits")
def list_visits_route(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db)
):
    return list_visits(db, ctx)
