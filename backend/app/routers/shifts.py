"""
Router pour les postes de garde, les prises de service et l'état des gardes.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.shift import GuardStatus, PostResponse, ShiftResponse, ShiftStart
from app.services import shift_service

router = APIRouter(prefix="/api/v1", tags=["Prises de service"])


@router.get("/posts", response_model=List[PostResponse], summary="Lister les postes")
def list_posts(db: Session = Depends(get_db)):
    return shift_service.list_posts(db)


@router.post("/shifts", response_model=ShiftResponse, status_code=201,
             summary="Démarrer une prise de service")
def start_shift(data: ShiftStart, db: Session = Depends(get_db)):
    """
    Ouvre une prise de service pour un garde sur un poste et le passe en actif.
    Retourne 404 si le garde ou le poste est inconnu, 409 si un service est déjà ouvert.
    """
    try:
        return shift_service.start_shift(db, data.guard_id, data.post_id)
    except ValueError as e:
        msg = str(e)
        if "introuvable" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=409, detail=msg)


@router.post("/shifts/{shift_id}/end", response_model=ShiftResponse,
             summary="Terminer une prise de service")
def end_shift(shift_id: int, db: Session = Depends(get_db)):
    """Clôture la prise de service (ended_at = now) et repasse le garde en inactif."""
    try:
        return shift_service.end_shift(db, shift_id)
    except ValueError as e:
        msg = str(e)
        if "introuvable" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=409, detail=msg)


@router.get("/guards/{guard_id}/status", response_model=GuardStatus,
            summary="État d'un garde")
def get_guard_status(guard_id: int, db: Session = Depends(get_db)):
    try:
        return shift_service.get_guard_status(db, guard_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
