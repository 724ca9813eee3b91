"""
Service de l'activité terrain des gardes : contrôles de présence,
main courante et alertes de panique.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.models.activity import LogbookEntry, PanicAlert, PresenceCheck
from app.models.guard import Guard
from app.models.post import Post
from app.schemas.activity import (
    LogbookEntryCreate,
    LogbookEntryResponse,
    PanicAlertCreate,
    PanicAlertResponse,
    PresenceCheckCreate,
    PresenceCheckResponse,
)
from app.services.email_service import send_panic_alert_email

logger = logging.getLogger(__name__)


def record_presence_check(db: Session, data: PresenceCheckCreate) -> PresenceCheckResponse:
    """Enregistre un pointage de présence. Lève ValueError si le garde est introuvable."""
    _get_guard(db, data.guard_id)

    check = PresenceCheck(
        guard_id=data.guard_id,
        post_id=data.post_id,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    db.add(check)
    db.commit()
    db.refresh(check)
    return PresenceCheckResponse.model_validate(check)


def create_logbook_entry(db: Session, data: LogbookEntryCreate) -> LogbookEntryResponse:
    """
    Ajoute une entrée à la main courante du garde.
    Le type est déjà normalisé par le schéma (OBSERVATION, INCIDENT ou NOTIFICATION).
    """
    _get_guard(db, data.guard_id)

    entry = LogbookEntry(
        guard_id=data.guard_id,
        entry_type=data.entry_type,
        description=data.description,
        photo=data.photo,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info("Main courante : %s ajouté par le garde %s", entry.entry_type, data.guard_id)
    return LogbookEntryResponse.model_validate(entry)


def list_logbook_entries(db: Session, guard_id: int) -> List[LogbookEntryResponse]:
    """Entrées de main courante d'un garde, de la plus récente à la plus ancienne."""
    entries = db.execute(
        select(LogbookEntry)
        .where(LogbookEntry.guard_id == guard_id)
        .order_by(LogbookEntry.id.desc())
    ).scalars().all()
    return [LogbookEntryResponse.model_validate(e) for e in entries]


def raise_panic_alert(db: Session, data: PanicAlertCreate) -> PanicAlertResponse:
    """
    Enregistre une alerte de panique puis prévient le superviseur par email.

    L'alerte est toujours persistée avant l'envoi : une erreur SMTP est
    journalisée mais ne fait pas échouer la requête du garde.
    """
    guard = _get_guard(db, data.guard_id)

    alert = PanicAlert(
        guard_id=data.guard_id,
        post_id=data.post_id,
        latitude=data.latitude,
        longitude=data.longitude,
    )
    db.add(alert)
    db.commit()
    db.refresh(alert)

    logger.warning(
        "ALERTE DE PANIQUE — garde %s, poste %s, position %s,%s",
        data.guard_id, data.post_id or "N/A", data.latitude, data.longitude,
    )

    notified = False
    if settings.ALERT_EMAIL_TO:
        post = db.get(Post, data.post_id) if data.post_id else None
        try:
            send_panic_alert_email(
                to_email=settings.ALERT_EMAIL_TO,
                guard_name=f"{guard.first_name} {guard.last_name}",
                latitude=data.latitude,
                longitude=data.longitude,
                post_name=post.name if post else None,
            )
            notified = True
        except Exception as exc:
            logger.error("Échec de l'envoi de l'alerte %s au superviseur : %s", alert.id, exc)

    return PanicAlertResponse(
        id=alert.id,
        guard_id=alert.guard_id,
        post_id=alert.post_id,
        latitude=alert.latitude,
        longitude=alert.longitude,
        supervisor_notified=notified,
        message="Alerte enregistrée et superviseur prévenu." if notified else "Alerte enregistrée.",
    )


def _get_guard(db: Session, guard_id: int) -> Guard:
    guard = db.get(Guard, guard_id)
    if guard is None:
        raise ValueError(f"Garde {guard_id} introuvable.")
    return guard
