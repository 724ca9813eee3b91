"""
Schémas Pydantic pour les rondes et le marquage des points de contrôle.
Endpoint principal : POST /api/v1/rounds/{round_id}/marks
"""

import datetime as dt
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from app.models.round import RoundStatus


class Coordinate(BaseModel):
    """Position GPS en degrés décimaux."""
    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def valid_latitude(cls, v: float) -> float:
        if not -90 <= v <= 90:
            raise ValueError("La latitude doit être comprise entre -90 et 90.")
        return v

    @field_validator("longitude")
    @classmethod
    def valid_longitude(cls, v: float) -> float:
        if not -180 <= v <= 180:
            raise ValueError("La longitude doit être comprise entre -180 et 180.")
        return v


class MarkCreate(BaseModel):
    """Scan d'un QR code de point de contrôle envoyé par l'app mobile."""
    checkpoint_ref: str  # identifiant numérique OU nom imprimé sur le QR (ex. "E1-P1")
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("checkpoint_ref")
    @classmethod
    def ref_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("La référence du point de contrôle ne peut pas être vide.")
        return v.strip()

    @field_validator("latitude")
    @classmethod
    def valid_latitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -90 <= v <= 90:
            raise ValueError("La latitude doit être comprise entre -90 et 90.")
        return v

    @field_validator("longitude")
    @classmethod
    def valid_longitude(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not -180 <= v <= 180:
            raise ValueError("La longitude doit être comprise entre -180 et 180.")
        return v

    def coordinate(self) -> Optional[Coordinate]:
        """Position complète, ou None (une position partielle est traitée comme absente)."""
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class MarkingResponse(BaseModel):
    id: int
    round_id: int
    checkpoint_id: int
    latitude: Optional[float]
    longitude: Optional[float]
    marked_at: datetime

    model_config = {"from_attributes": True}


class RoundProgress(BaseModel):
    current: int
    total: int
    percentage: int


class MarkResult(BaseModel):
    """Réponse d'un marquage accepté."""
    success: bool = True
    marking: MarkingResponse
    round_completed: bool
    round_status: str
    progress: RoundProgress


class RoundStatusUpdate(BaseModel):
    """Changement de statut demandé par l'app garde (PATCH)."""
    status: RoundStatus


class RoundStatusResponse(BaseModel):
    id: int
    previous_status: str
    status: str


class RoundSummary(BaseModel):
    """Ronde assignée avec son avancement (liste de l'app garde)."""
    id: int
    guard_id: int
    route_id: Optional[int]
    route_name: Optional[str]
    route_description: Optional[str]
    scheduled_date: dt.date
    scheduled_time: Optional[dt.time]
    status: str
    total_checkpoints: int
    marked_checkpoints: int


class RoundCheckpointStatus(BaseModel):
    """Point de contrôle d'une ronde avec son état de marquage."""
    id: int
    name: str
    description: Optional[str]
    marked: bool
    marked_at: Optional[datetime]


class RoundCheckpointsResponse(BaseModel):
    round_id: int
    route_id: int
    checkpoints: List[RoundCheckpointStatus]
