"""
Visit schemas.
"""
from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from .models import VisitStatus

class VisitInput(BaseModel):
    """
    Draft visit payload.

    Fields:
    - type: Intake category; selects which draft slot is written
    - questionnaire: Intake answers
    - telephone: Contact number
    """
    type: str = Field(..., min_length=1)
    questionnaire: Dict[str, Any] = Field(default_factory=dict)
    telephone: Optional[str] = None

class VisitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    status: VisitStatus
    questionnaire: Optional[Dict[str, Any]] = None
    telephone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
