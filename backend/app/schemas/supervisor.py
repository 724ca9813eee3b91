"""
Schémas Pydantic pour le tableau de bord superviseur.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from app.schemas.activity import PresenceCheckResponse


class LastLocation(BaseModel):
    latitude: Optional[float]
    longitude: Optional[float]
    checked_at: Optional[datetime]


class RoundProgressSummary(BaseModel):
    text: str
    percentage: int
    round_id: Optional[int] = None
    status: Optional[str] = None


class GuardOverview(BaseModel):
    """Ligne du tableau de bord : un garde, sa position et l'avancement de sa ronde."""
    id: int
    rut: str
    first_name: str
    last_name: str
    is_active: bool
    post_id: Optional[int]
    last_location: Optional[LastLocation]
    progress: RoundProgressSummary


class GuardInfo(BaseModel):
    id: int
    rut: str
    first_name: str
    last_name: str
    email: Optional[str]
    is_active: bool

    model_config = {"from_attributes": True}


class GuardProfile(BaseModel):
    guard: GuardInfo
    recent_checks: List[PresenceCheckResponse]
