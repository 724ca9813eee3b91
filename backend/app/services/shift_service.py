"""
Service métier des prises de service (postes de garde).

Un garde est « actif » tant qu'il a une prise de service ouverte (ended_at NULL).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.guard import Guard
from app.models.post import Post, Shift
from app.schemas.shift import GuardStatus, PostResponse, ShiftResponse

logger = logging.getLogger(__name__)


def list_posts(db: Session) -> List[PostResponse]:
    posts = db.execute(select(Post).order_by(Post.name)).scalars().all()
    return [PostResponse.model_validate(p) for p in posts]


def start_shift(db: Session, guard_id: int, post_id: int) -> ShiftResponse:
    """
    Ouvre une prise de service et passe le garde en actif.

    Lève ValueError si le garde ou le poste est introuvable,
    ou si le garde a déjà une prise de service ouverte.
    """
    guard = db.get(Guard, guard_id)
    if guard is None:
        raise ValueError(f"Garde {guard_id} introuvable.")
    post = db.get(Post, post_id)
    if post is None:
        raise ValueError(f"Poste {post_id} introuvable.")

    if get_open_shift(db, guard_id) is not None:
        raise ValueError("Ce garde a déjà une prise de service en cours.")

    shift = Shift(
        guard_id=guard_id,
        post_id=post_id,
        started_at=datetime.now(timezone.utc),
    )
    db.add(shift)
    guard.is_active = True
    db.commit()
    db.refresh(shift)

    logger.info("Prise de service %s : garde %s au poste %s", shift.id, guard_id, post_id)
    return ShiftResponse.model_validate(shift)


def end_shift(db: Session, shift_id: int) -> ShiftResponse:
    """
    Clôture une prise de service et repasse le garde en inactif.
    Lève ValueError si la prise de service est introuvable ou déjà clôturée.
    """
    shift = db.get(Shift, shift_id)
    if shift is None:
        raise ValueError(f"Prise de service {shift_id} introuvable.")
    if shift.ended_at is not None:
        raise ValueError("La prise de service est déjà clôturée.")

    shift.ended_at = datetime.now(timezone.utc)
    guard = db.get(Guard, shift.guard_id)
    if guard is not None:
        guard.is_active = False
    db.commit()
    db.refresh(shift)

    logger.info("Fin de service %s (garde %s)", shift.id, shift.guard_id)
    return ShiftResponse.model_validate(shift)


def get_guard_status(db: Session, guard_id: int) -> GuardStatus:
    """Retourne l'état d'un garde et sa prise de service ouverte, s'il en a une."""
    guard = db.get(Guard, guard_id)
    if guard is None:
        raise ValueError(f"Garde {guard_id} introuvable.")

    if not guard.is_active:
        return GuardStatus(guard_id=guard.id, is_active=False)

    shift = get_open_shift(db, guard_id)
    return GuardStatus(
        guard_id=guard.id,
        is_active=True,
        shift_id=shift.id if shift else None,
        post_id=shift.post_id if shift else None,
    )


def get_open_shift(db: Session, guard_id: int) -> Optional[Shift]:
    """Dernière prise de service encore ouverte du garde."""
    return db.execute(
        select(Shift)
        .where(Shift.guard_id == guard_id, Shift.ended_at.is_(None))
        .order_by(Shift.id.desc())
        .limit(1)
    ).scalar()
