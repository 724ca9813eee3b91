"""
Router du tableau de bord superviseur : état des gardes, fiches, notifications.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.notification import NotificationCreate, NotificationResponse
from app.schemas.supervisor import GuardOverview, GuardProfile
from app.services import notification_service, supervisor_service

router = APIRouter(prefix="/api/v1/supervisor", tags=["Superviseur"])


@router.get("/guards", response_model=List[GuardOverview], summary="Vue d'ensemble des gardes")
def get_guards_overview(db: Session = Depends(get_db)):
    """
    Retourne tous les gardes avec :
    - leur poste courant (prise de service ouverte)
    - leur dernière position connue (dernier contrôle de présence)
    - l'avancement de leur ronde en cours ou à démarrer
    """
    return supervisor_service.get_guards_overview(db)


@router.get("/guards/{guard_id}", response_model=GuardProfile, summary="Fiche d'un garde")
def get_guard_profile(guard_id: int, db: Session = Depends(get_db)):
    try:
        return supervisor_service.get_guard_profile(db, guard_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/notifications", response_model=NotificationResponse, status_code=201,
             summary="Envoyer une notification à un garde")
def send_notification(data: NotificationCreate, db: Session = Depends(get_db)):
    try:
        return notification_service.send_notification(db, data.guard_id, data.message)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
