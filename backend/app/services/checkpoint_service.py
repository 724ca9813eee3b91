"""
Service de l'annuaire des points de contrôle.
Consultation des points d'un parcours et génération des QR codes à imprimer.
"""

import io
import logging
from typing import List

import qrcode
from sqlalchemy.orm import Session

from app.models.route import Route
from app.schemas.checkpoint import CheckpointResponse
from app.services import round_service

logger = logging.getLogger(__name__)


def get_route_checkpoints(db: Session, route_id: int) -> List[CheckpointResponse]:
    """
    Retourne les points d'un parcours dans l'ordre de passage (identifiant croissant).
    Lève ValueError si le parcours est introuvable.
    """
    route = db.get(Route, route_id)
    if route is None:
        raise ValueError(f"Parcours {route_id} introuvable.")

    return [
        CheckpointResponse.model_validate(cp)
        for cp in round_service.list_route_checkpoints(db, route_id)
    ]


def generate_qr_image(payload: str) -> bytes:
    """Génère une image PNG du QR code encodant la valeur donnée."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_checkpoint_qr(db: Session, checkpoint_ref: str) -> bytes:
    """
    Génère le QR code à coller sur un point de contrôle.

    Le QR encode le nom du point : c'est la valeur que l'app mobile renvoie
    telle quelle comme checkpoint_ref lors du marquage.
    Lève ValueError si le point est introuvable.
    """
    checkpoint = round_service.resolve_checkpoint(db, checkpoint_ref)
    if checkpoint is None:
        raise ValueError(f"Point de contrôle {checkpoint_ref} introuvable.")

    logger.info("QR code généré pour le point %s (%s)", checkpoint.id, checkpoint.name)
    return generate_qr_image(checkpoint.name)
