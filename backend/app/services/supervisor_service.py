"""
Service du tableau de bord superviseur.

Agrège pour chaque garde : poste courant, dernière position connue
(dernier contrôle de présence) et avancement de la ronde en cours.
"""

import logging
from typing import List, Optional

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from app.models.activity import PresenceCheck
from app.models.guard import Guard
from app.models.round import Round, RoundStatus
from app.schemas.activity import PresenceCheckResponse
from app.schemas.supervisor import (
    GuardInfo,
    GuardOverview,
    GuardProfile,
    LastLocation,
    RoundProgressSummary,
)
from app.services import round_service, shift_service

logger = logging.getLogger(__name__)

RECENT_CHECKS_LIMIT = 20
NO_ACTIVE_ROUND = RoundProgressSummary(text="Aucune ronde active", percentage=0)


def get_guards_overview(db: Session) -> List[GuardOverview]:
    """Une ligne par garde pour la carte et la liste du tableau de bord."""
    guards = db.execute(
        select(Guard).order_by(Guard.last_name, Guard.first_name)
    ).scalars().all()

    overview = []
    for guard in guards:
        shift = shift_service.get_open_shift(db, guard.id)
        overview.append(
            GuardOverview(
                id=guard.id,
                rut=guard.rut,
                first_name=guard.first_name,
                last_name=guard.last_name,
                is_active=bool(guard.is_active),
                post_id=shift.post_id if shift else None,
                last_location=_last_location(db, guard.id),
                progress=_current_round_progress(db, guard) if guard.is_active else NO_ACTIVE_ROUND,
            )
        )

    logger.debug("Tableau de bord : %d gardes", len(overview))
    return overview


def get_guard_profile(db: Session, guard_id: int) -> GuardProfile:
    """Fiche d'un garde avec ses derniers contrôles de présence."""
    guard = db.get(Guard, guard_id)
    if guard is None:
        raise ValueError(f"Garde {guard_id} introuvable.")

    checks = db.execute(
        select(PresenceCheck)
        .where(PresenceCheck.guard_id == guard_id)
        .order_by(PresenceCheck.id.desc())
        .limit(RECENT_CHECKS_LIMIT)
    ).scalars().all()

    return GuardProfile(
        guard=GuardInfo.model_validate(guard),
        recent_checks=[PresenceCheckResponse.model_validate(c) for c in checks],
    )


def _last_location(db: Session, guard_id: int) -> Optional[LastLocation]:
    check = db.execute(
        select(PresenceCheck)
        .where(PresenceCheck.guard_id == guard_id)
        .order_by(PresenceCheck.id.desc())
        .limit(1)
    ).scalar()
    if check is None:
        return None
    return LastLocation(
        latitude=check.latitude,
        longitude=check.longitude,
        checked_at=check.checked_at,
    )


def _current_round_progress(db: Session, guard: Guard) -> RoundProgressSummary:
    """Ronde en cours en priorité, sinon la plus ancienne ronde à démarrer."""
    rnd = db.execute(
        select(Round)
        .where(
            Round.guard_id == guard.id,
            Round.status.in_([RoundStatus.IN_PROGRESS.value, RoundStatus.PENDING.value]),
        )
        .order_by(
            case((Round.status == RoundStatus.IN_PROGRESS.value, 1), else_=2),
            Round.id,
        )
        .limit(1)
    ).scalar()
    if rnd is None:
        return NO_ACTIVE_ROUND

    progress = round_service.compute_progress(db, rnd.id)
    if rnd.status == RoundStatus.PENDING.value:
        text = f"À démarrer ({progress.total} points)"
    else:
        text = f"{progress.current}/{progress.total} points"

    return RoundProgressSummary(
        text=text,
        percentage=progress.percentage,
        round_id=rnd.id,
        status=rnd.status,
    )
