"""
Schémas Pydantic pour l'annuaire des points de contrôle.
"""

from typing import Optional

from pydantic import BaseModel


class CheckpointResponse(BaseModel):
    id: int
    route_id: int
    name: str
    description: Optional[str]
    expected_latitude: Optional[float]
    expected_longitude: Optional[float]
    tolerance_radius: Optional[float]

    model_config = {"from_attributes": True}
