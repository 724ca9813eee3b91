"""
Schémas Pydantic pour l'activité terrain : présence, main courante, alerte de panique.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

VALID_ENTRY_TYPES = {"OBSERVATION", "INCIDENT", "NOTIFICATION"}


class PresenceCheckCreate(BaseModel):
    guard_id: int
    post_id: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class PresenceCheckResponse(BaseModel):
    id: int
    guard_id: int
    post_id: int
    latitude: Optional[float]
    longitude: Optional[float]
    checked_at: Optional[datetime]

    model_config = {"from_attributes": True}


class LogbookEntryCreate(BaseModel):
    guard_id: int
    entry_type: str  # OBSERVATION, INCIDENT ; tout autre valeur → NOTIFICATION
    description: str
    photo: Optional[str] = None  # base64

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("La description ne peut pas être vide.")
        return v.strip()

    @field_validator("entry_type")
    @classmethod
    def normalize_entry_type(cls, v: str) -> str:
        normalized = v.strip().upper()
        return normalized if normalized in VALID_ENTRY_TYPES else "NOTIFICATION"


class LogbookEntryResponse(BaseModel):
    id: int
    guard_id: int
    entry_type: str
    description: str
    photo: Optional[str]
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}


class PanicAlertCreate(BaseModel):
    guard_id: int
    post_id: Optional[int] = None
    latitude: float
    longitude: float


class PanicAlertResponse(BaseModel):
    id: int
    guard_id: int
    post_id: Optional[int]
    latitude: float
    longitude: float
    supervisor_notified: bool
    message: str
