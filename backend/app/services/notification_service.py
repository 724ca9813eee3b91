"""
Service des notifications superviseur → garde.
Les notifications sont stockées puis relevées par l'app mobile (cloche).
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.guard import Guard
from app.models.notification import Notification
from app.schemas.notification import NotificationResponse

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


def send_notification(db: Session, guard_id: int, message: str) -> NotificationResponse:
    """Crée une notification pour un garde. Lève ValueError si le garde est introuvable."""
    if db.get(Guard, guard_id) is None:
        raise ValueError(f"Garde {guard_id} introuvable.")

    notification = Notification(guard_id=guard_id, message=message, is_read=False)
    db.add(notification)
    db.commit()
    db.refresh(notification)

    logger.info("Notification %s envoyée au garde %s", notification.id, guard_id)
    return NotificationResponse.model_validate(notification)


def list_notifications(db: Session, guard_id: int, limit: int = DEFAULT_LIMIT) -> List[NotificationResponse]:
    notifications = db.execute(
        select(Notification)
        .where(Notification.guard_id == guard_id)
        .order_by(Notification.id.desc())
        .limit(limit)
    ).scalars().all()
    return [NotificationResponse.model_validate(n) for n in notifications]


def mark_notification_read(db: Session, notification_id: int) -> NotificationResponse:
    """Accusé de lecture. Idempotent : relire une notification déjà lue ne change rien."""
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise ValueError(f"Notification {notification_id} introuvable.")

    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return NotificationResponse.model_validate(notification)
