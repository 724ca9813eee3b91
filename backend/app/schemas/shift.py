"""
Schémas Pydantic pour les postes, prises de service et l'état d'un garde.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PostResponse(BaseModel):
    id: int
    name: str
    facilities: Optional[str]

    model_config = {"from_attributes": True}


class ShiftStart(BaseModel):
    guard_id: int
    post_id: int


class ShiftResponse(BaseModel):
    id: int
    guard_id: int
    post_id: int
    started_at: datetime
    ended_at: Optional[datetime]

    model_config = {"from_attributes": True}


class GuardStatus(BaseModel):
    """État courant d'un garde : en service ou non, et sur quel poste."""
    guard_id: int
    is_active: bool
    shift_id: Optional[int] = None
    post_id: Optional[int] = None
