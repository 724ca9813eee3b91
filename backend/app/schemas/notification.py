"""
Schémas Pydantic pour les notifications superviseur → garde.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class NotificationCreate(BaseModel):
    guard_id: int
    message: str

    @field_validator("message")
    @classmethod
    def message_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le message ne peut pas être vide.")
        return v.strip()


class NotificationResponse(BaseModel):
    id: int
    guard_id: int
    message: str
    is_read: bool
    created_at: Optional[datetime]

    model_config = {"from_attributes": True}
