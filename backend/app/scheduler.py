"""
Planificateur APScheduler pour les rappels de rondes en retard.

Le job s'exécute à intervalle régulier et notifie chaque garde dont une ronde
du jour a dépassé son heure prévue sans avoir été démarrée (statut PENDING).
Un seul rappel par ronde (reminder_sent_at).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.database import SessionLocal
from app.models.notification import Notification
from app.models.round import Round, RoundStatus

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def send_overdue_round_reminders(db: Session, now: Optional[datetime] = None) -> int:
    """
    Crée une notification pour chaque ronde du jour en retard et non encore rappelée.
    Retourne le nombre de rappels envoyés.
    """
    now = now or datetime.now()
    rounds = db.execute(
        select(Round).where(
            Round.scheduled_date == now.date(),
            Round.scheduled_time.is_not(None),
            Round.scheduled_time <= now.time(),
            Round.status == RoundStatus.PENDING.value,
            Round.reminder_sent_at.is_(None),
        )
    ).scalars().all()

    for rnd in rounds:
        db.add(
            Notification(
                guard_id=rnd.guard_id,
                message=(
                    f"Rappel : la ronde prévue à {rnd.scheduled_time.strftime('%H:%M')} "
                    "n'a pas encore été démarrée."
                ),
                is_read=False,
            )
        )
        rnd.reminder_sent_at = datetime.now(timezone.utc)

    if rounds:
        db.commit()
    return len(rounds)


def _remind_overdue_rounds_scheduled() -> None:
    """Tâche planifiée : ouvre sa propre session BDD."""
    db = SessionLocal()
    try:
        count = send_overdue_round_reminders(db)
        if count:
            logger.info("Rappels de rondes en retard envoyés : %d", count)
    except Exception as exc:
        logger.error("Erreur lors de l'envoi des rappels de rondes : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        _remind_overdue_rounds_scheduled,
        trigger="interval",
        minutes=settings.ROUND_REMINDER_INTERVAL_MINUTES,
        id="overdue_round_reminders",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré — rappels de rondes toutes les %d minutes.",
        settings.ROUND_REMINDER_INTERVAL_MINUTES,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
