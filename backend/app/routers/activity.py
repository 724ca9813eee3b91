"""
Router pour l'activité terrain : contrôles de présence, main courante, alertes de panique.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.activity import (
    LogbookEntryCreate,
    LogbookEntryResponse,
    PanicAlertCreate,
    PanicAlertResponse,
    PresenceCheckCreate,
    PresenceCheckResponse,
)
from app.services import activity_service

router = APIRouter(prefix="/api/v1", tags=["Activité terrain"])


@router.post("/presence-checks", response_model=PresenceCheckResponse, status_code=201,
             summary="Enregistrer un contrôle de présence")
def record_presence_check(data: PresenceCheckCreate, db: Session = Depends(get_db)):
    try:
        return activity_service.record_presence_check(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/logbook", response_model=LogbookEntryResponse, status_code=201,
             summary="Ajouter une entrée de main courante")
def create_logbook_entry(data: LogbookEntryCreate, db: Session = Depends(get_db)):
    """
    Ajoute une observation, un incident ou une notification à la main courante.
    Une photo encodée en base64 peut être jointe.
    """
    try:
        return activity_service.create_logbook_entry(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/logbook", response_model=List[LogbookEntryResponse],
            summary="Main courante d'un garde")
def list_logbook_entries(guard_id: int, db: Session = Depends(get_db)):
    """Entrées du garde, de la plus récente à la plus ancienne."""
    return activity_service.list_logbook_entries(db, guard_id)


@router.post("/panic-alerts", response_model=PanicAlertResponse, status_code=201,
             summary="Déclencher une alerte de panique")
def raise_panic_alert(data: PanicAlertCreate, db: Session = Depends(get_db)):
    """
    Enregistre l'alerte avec la position du garde et prévient le superviseur par email
    (si ALERT_EMAIL_TO est configuré). L'alerte est enregistrée même si l'email échoue.
    """
    try:
        return activity_service.raise_panic_alert(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
