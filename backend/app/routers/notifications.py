"""
Router pour les notifications côté garde (cloche de l'app mobile).
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.notification import NotificationResponse
from app.services import notification_service

router = APIRouter(prefix="/api/v1", tags=["Notifications"])


@router.get("/guards/{guard_id}/notifications", response_model=List[NotificationResponse],
            summary="Notifications d'un garde")
def list_notifications(guard_id: int, db: Session = Depends(get_db)):
    """Les 50 dernières notifications du garde, de la plus récente à la plus ancienne."""
    return notification_service.list_notifications(db, guard_id)


@router.post("/notifications/{notification_id}/read", response_model=NotificationResponse,
             summary="Marquer une notification comme lue")
def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    try:
        return notification_service.mark_notification_read(db, notification_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
