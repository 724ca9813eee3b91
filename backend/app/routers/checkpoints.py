"""
Routers pour l'annuaire des points de contrôle et leurs QR codes.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.checkpoint import CheckpointResponse
from app.services import checkpoint_service

# GET /api/v1/routes/{route_id}/checkpoints
router = APIRouter(prefix="/api/v1/routes", tags=["Points de contrôle"])

# GET /api/v1/checkpoints/{checkpoint_ref}/qr
checkpoints_router = APIRouter(prefix="/api/v1/checkpoints", tags=["Points de contrôle"])


@router.get(
    "/{route_id}/checkpoints",
    response_model=List[CheckpointResponse],
    summary="Points de contrôle d'un parcours",
)
def list_route_checkpoints(route_id: int, db: Session = Depends(get_db)):
    """Retourne les points du parcours dans l'ordre de passage. 404 si le parcours est inconnu."""
    try:
        return checkpoint_service.get_route_checkpoints(db, route_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@checkpoints_router.get(
    "/{checkpoint_ref}/qr",
    summary="QR code imprimable d'un point de contrôle",
    responses={200: {"content": {"image/png": {}}}},
)
def get_checkpoint_qr(checkpoint_ref: str, db: Session = Depends(get_db)):
    """
    Génère le QR code PNG à coller sur le point de contrôle.
    checkpoint_ref accepte l'identifiant ou le nom du point.
    """
    try:
        png = checkpoint_service.generate_checkpoint_qr(db, checkpoint_ref)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(content=png, media_type="image/png")
