"""
Router pour les rondes : marquage des points de contrôle par scan QR,
changement de statut, avancement et liste des rondes assignées.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import MarkingRejected
from app.schemas.round import (
    MarkCreate,
    MarkResult,
    RoundCheckpointsResponse,
    RoundProgress,
    RoundStatusResponse,
    RoundStatusUpdate,
    RoundSummary,
)
from app.services import round_service

router = APIRouter(prefix="/api/v1/rounds", tags=["Rondes"])


@router.get("", response_model=List[RoundSummary], summary="Lister les rondes assignées")
def list_rounds(
    guard_id: Optional[int] = None,
    post_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Rondes filtrées par garde et/ou poste, avec points totaux et points marqués."""
    return round_service.list_rounds(db, guard_id=guard_id, post_id=post_id)


@router.post(
    "/{round_id}/marks",
    response_model=MarkResult,
    summary="Marquer un point de contrôle (scan QR)",
)
def submit_mark(round_id: int, data: MarkCreate, db: Session = Depends(get_db)):
    """
    Valide le scan d'un point de contrôle et l'enregistre dans la ronde.

    Refus possibles (corps : success=false, error=<code>, message) :
    - 404 NOT_FOUND : ronde ou point introuvable
    - 400 MISSING_LOCATION : position GPS requise pour ce point
    - 400 OUT_OF_RANGE : trop loin du point (distance_meters renvoyée)
    - 400 ROUTE_MISMATCH : le point n'appartient pas au parcours de la ronde
    - 400 OUT_OF_ORDER : le point précédent n'est pas encore marqué
    - 400 DUPLICATE_MARK : point déjà marqué dans cette ronde
    - 500 STORE_FAILURE : échec d'écriture en base
    """
    try:
        return round_service.submit_mark(db, round_id, data.checkpoint_ref, data.coordinate())
    except MarkingRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_payload())


@router.patch(
    "/{round_id}",
    response_model=RoundStatusResponse,
    summary="Changer le statut d'une ronde",
)
def update_round_status(round_id: int, data: RoundStatusUpdate, db: Session = Depends(get_db)):
    """
    Fait avancer le statut d'une ronde (PENDING → IN_PROGRESS → COMPLETED).
    Retourne 404 si la ronde est inconnue, 409 pour un retour en arrière.
    """
    try:
        return round_service.update_round_status(db, round_id, data.status)
    except MarkingRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_payload())
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get(
    "/{round_id}/progress",
    response_model=RoundProgress,
    summary="Avancement d'une ronde",
)
def get_progress(round_id: int, db: Session = Depends(get_db)):
    try:
        return round_service.compute_progress(db, round_id)
    except MarkingRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_payload())


@router.get(
    "/{round_id}/checkpoints",
    response_model=RoundCheckpointsResponse,
    summary="Points de contrôle d'une ronde avec état de marquage",
)
def get_round_checkpoints(round_id: int, db: Session = Depends(get_db)):
    """Points du parcours dans l'ordre de passage, marqués ou non, avec l'heure de marquage."""
    try:
        return round_service.get_round_checkpoints(db, round_id)
    except MarkingRejected as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_payload())
