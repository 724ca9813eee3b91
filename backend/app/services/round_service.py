"""
Service métier des rondes : validation et enregistrement des marquages de
points de contrôle, calcul de l'avancement.

Pipeline de submit_mark (chaque étape interrompt la suite en cas d'échec,
l'ordre fixe la priorité des erreurs renvoyées au garde) :
  1. Résoudre le point de contrôle (identifiant, puis nom)
  2. Géorepérage si le point a une position attendue
  3. Résoudre la ronde et son parcours
  4. Le point appartient au parcours de la ronde
  5. Charger les points du parcours (ordre croissant des identifiants)
  6. Le point précédent est déjà marqué dans cette ronde
  7. Le point n'est pas déjà marqué dans cette ronde
  8. Insérer le marquage
  9. Recalculer l'avancement et faire avancer le statut de la ronde
Aucune écriture n'a lieu avant l'étape 8. Tout le pipeline s'exécute sous le
verrou de la ronde (round_locks) et la ligne de la ronde est lue FOR UPDATE.
"""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    DuplicateMarkError,
    MarkingRejected,
    MissingLocationError,
    NotFoundError,
    OutOfOrderError,
    OutOfRangeError,
    RouteMismatchError,
    StoreFailureError,
)
from app.models.round import Marking, Round, RoundStatus
from app.models.route import Checkpoint, Route
from app.schemas.round import (
    Coordinate,
    MarkingResponse,
    MarkResult,
    RoundCheckpointsResponse,
    RoundCheckpointStatus,
    RoundProgress,
    RoundStatusResponse,
    RoundSummary,
)
from app.services.geofence import haversine_distance
from app.services.round_locks import round_lock

logger = logging.getLogger(__name__)

MAX_CHECKPOINT_ID = 2**31 - 1  # INTEGER PostgreSQL


def submit_mark(
    db: Session,
    round_id: int,
    checkpoint_ref: str,
    coordinate: Optional[Coordinate] = None,
) -> MarkResult:
    """
    Valide et enregistre le scan d'un point de contrôle pendant une ronde.

    Lève une sous-classe de MarkingRejected (voir app.exceptions) si le scan
    est refusé. Aucun rejet n'est retenté automatiquement.
    """
    with round_lock(round_id):
        try:
            return _submit_mark_locked(db, round_id, checkpoint_ref, coordinate)
        except MarkingRejected as exc:
            logger.warning(
                "Marquage refusé — ronde %s, point %r : %s", round_id, checkpoint_ref, exc.code
            )
            raise


def _submit_mark_locked(
    db: Session,
    round_id: int,
    checkpoint_ref: str,
    coordinate: Optional[Coordinate],
) -> MarkResult:
    # 1. Résolution du point (le QR peut porter l'identifiant "1" ou le nom "E1-P1")
    checkpoint = resolve_checkpoint(db, checkpoint_ref)
    if checkpoint is None:
        raise NotFoundError("checkpoint", "Point de contrôle introuvable ou invalide.")

    # 2. Géorepérage
    if checkpoint.has_expected_location:
        _check_geofence(checkpoint, coordinate)

    # 3. Ronde et parcours assigné
    rnd = get_round(db, round_id, for_update=True)
    if rnd is None or rnd.route_id is None:
        raise NotFoundError("round", f"Ronde {round_id} introuvable.")

    # 4. Le point doit appartenir au parcours de la ronde
    if checkpoint.route_id != rnd.route_id:
        raise RouteMismatchError()

    # 5-6. Ordre séquentiel : le point précédent doit déjà être marqué
    ordered_ids = [cp.id for cp in list_route_checkpoints(db, rnd.route_id)]
    if checkpoint.id not in ordered_ids:
        raise RouteMismatchError()
    position = ordered_ids.index(checkpoint.id)
    if position > 0 and find_mark(db, round_id, ordered_ids[position - 1]) is None:
        raise OutOfOrderError()

    # 7. Pas de double marquage
    if find_mark(db, round_id, checkpoint.id) is not None:
        raise DuplicateMarkError()

    # 8-9. Écriture du marquage puis avancement, dans la même transaction
    previous_status = rnd.status
    try:
        marking = insert_mark(db, round_id, checkpoint.id, coordinate, datetime.now(timezone.utc))
        progress = _make_progress(
            count_distinct_marks(db, round_id),
            count_route_checkpoints(db, rnd.route_id),
        )
        round_completed = progress.current >= progress.total
        rnd.status = _next_status(rnd.status, round_completed).value
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(
            "Échec d'enregistrement du marquage (ronde %s, point %s) : %s",
            round_id, checkpoint.id, exc,
        )
        raise StoreFailureError() from exc

    db.refresh(marking)

    logger.info(
        "Marquage accepté — ronde %s, point %s (%d/%d)",
        round_id, checkpoint.id, progress.current, progress.total,
    )
    if rnd.status != previous_status:
        logger.info("Ronde %s : %s → %s", round_id, previous_status, rnd.status)

    return MarkResult(
        marking=MarkingResponse.model_validate(marking),
        round_completed=round_completed,
        round_status=rnd.status,
        progress=progress,
    )


def compute_progress(db: Session, round_id: int) -> RoundProgress:
    """
    Avancement d'une ronde (lecture seule).
    Retourne 0/0 (0 %) quand le parcours n'a aucun point de contrôle.
    """
    rnd = get_round(db, round_id)
    if rnd is None:
        raise NotFoundError("round", f"Ronde {round_id} introuvable.")
    if rnd.route_id is None:
        return _make_progress(0, 0)

    return _make_progress(
        count_distinct_marks(db, round_id),
        count_route_checkpoints(db, rnd.route_id),
    )


def update_round_status(db: Session, round_id: int, status: RoundStatus) -> RoundStatusResponse:
    """
    Change directement le statut d'une ronde (ex. démarrer une ronde avant le premier scan).

    La transition passe par RoundStatus.advance_to : un retour en arrière lève ValueError.
    Lève NotFoundError si la ronde est introuvable.
    """
    with round_lock(round_id):
        rnd = get_round(db, round_id, for_update=True)
        if rnd is None:
            raise NotFoundError("round", f"Ronde {round_id} introuvable.")

        previous_status = rnd.status
        try:
            new_status = RoundStatus(previous_status).advance_to(status)
        except ValueError:
            db.rollback()
            logger.warning(
                "Ronde %s : transition refusée %s → %s",
                round_id, previous_status, RoundStatus(status).value,
            )
            raise

        rnd.status = new_status.value
        db.commit()

    if new_status.value != previous_status:
        logger.info("Ronde %s : %s → %s (mise à jour manuelle)", round_id, previous_status, new_status.value)
    return RoundStatusResponse(id=round_id, previous_status=previous_status, status=new_status.value)


def list_rounds(
    db: Session,
    guard_id: Optional[int] = None,
    post_id: Optional[int] = None,
) -> List[RoundSummary]:
    """Rondes (filtrées par garde et/ou poste) avec leur nombre de points total et marqués."""
    total_sq = (
        select(func.count(Checkpoint.id))
        .where(Checkpoint.route_id == Round.route_id)
        .correlate(Round)
        .scalar_subquery()
    )
    marked_sq = (
        select(func.count(Marking.checkpoint_id.distinct()))
        .where(Marking.round_id == Round.id)
        .correlate(Round)
        .scalar_subquery()
    )

    stmt = (
        select(Round, Route, total_sq.label("total"), marked_sq.label("marked"))
        .outerjoin(Route, Route.id == Round.route_id)
    )
    if guard_id is not None:
        stmt = stmt.where(Round.guard_id == guard_id)
    if post_id is not None:
        stmt = stmt.where(Route.post_id == post_id)
    stmt = stmt.order_by(Round.scheduled_date, Round.scheduled_time, Round.id)

    return [
        RoundSummary(
            id=rnd.id,
            guard_id=rnd.guard_id,
            route_id=rnd.route_id,
            route_name=route.name if route else None,
            route_description=route.description if route else None,
            scheduled_date=rnd.scheduled_date,
            scheduled_time=rnd.scheduled_time,
            status=rnd.status,
            total_checkpoints=total or 0,
            marked_checkpoints=marked or 0,
        )
        for rnd, route, total, marked in db.execute(stmt).all()
    ]


def get_round_checkpoints(db: Session, round_id: int) -> RoundCheckpointsResponse:
    """Points du parcours d'une ronde, dans l'ordre de passage, avec leur état de marquage."""
    rnd = get_round(db, round_id)
    if rnd is None or rnd.route_id is None:
        raise NotFoundError("round", f"Ronde {round_id} introuvable.")

    rows = db.execute(
        select(Checkpoint, Marking)
        .outerjoin(
            Marking,
            and_(
                Marking.checkpoint_id == Checkpoint.id,
                Marking.round_id == round_id,
            ),
        )
        .where(Checkpoint.route_id == rnd.route_id)
        .order_by(Checkpoint.id)
    ).all()

    return RoundCheckpointsResponse(
        round_id=round_id,
        route_id=rnd.route_id,
        checkpoints=[
            RoundCheckpointStatus(
                id=cp.id,
                name=cp.name,
                description=cp.description,
                marked=marking is not None,
                marked_at=marking.marked_at if marking else None,
            )
            for cp, marking in rows
        ],
    )


# ----------------------------------------------------------------
# Accès aux données (annuaire des points, rondes, marquages)
# ----------------------------------------------------------------

def resolve_checkpoint(db: Session, checkpoint_ref: str) -> Optional[Checkpoint]:
    """
    Résout un point par identifiant numérique, sinon par nom.
    Seuls les chiffres ASCII dans la plage d'une colonne INTEGER sont tentés comme
    identifiant ("²" ou un nombre de 23 chiffres sont cherchés comme nom).
    """
    ref = str(checkpoint_ref).strip()
    checkpoint = None
    if ref.isascii() and ref.isdigit() and int(ref) <= MAX_CHECKPOINT_ID:
        checkpoint = db.get(Checkpoint, int(ref))
    if checkpoint is None:
        checkpoint = db.execute(select(Checkpoint).where(Checkpoint.name == ref)).scalar()
    return checkpoint


def list_route_checkpoints(db: Session, route_id: int) -> List[Checkpoint]:
    return db.execute(
        select(Checkpoint)
        .where(Checkpoint.route_id == route_id)
        .order_by(Checkpoint.id)
    ).scalars().all()


def get_round(db: Session, round_id: int, for_update: bool = False) -> Optional[Round]:
    stmt = select(Round).where(Round.id == round_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar()


def find_mark(db: Session, round_id: int, checkpoint_id: int) -> Optional[Marking]:
    return db.execute(
        select(Marking).where(
            Marking.round_id == round_id,
            Marking.checkpoint_id == checkpoint_id,
        )
    ).scalar()


def insert_mark(
    db: Session,
    round_id: int,
    checkpoint_id: int,
    coordinate: Optional[Coordinate],
    marked_at: datetime,
) -> Marking:
    marking = Marking(
        round_id=round_id,
        checkpoint_id=checkpoint_id,
        latitude=coordinate.latitude if coordinate else None,
        longitude=coordinate.longitude if coordinate else None,
        marked_at=marked_at,
    )
    db.add(marking)
    db.flush()  # autoflush=False : rendre le marquage visible aux comptages qui suivent
    return marking


def count_distinct_marks(db: Session, round_id: int) -> int:
    return db.execute(
        select(func.count(Marking.checkpoint_id.distinct()))
        .where(Marking.round_id == round_id)
    ).scalar() or 0


def count_route_checkpoints(db: Session, route_id: int) -> int:
    return db.execute(
        select(func.count())
        .select_from(Checkpoint)
        .where(Checkpoint.route_id == route_id)
    ).scalar() or 0


# ----------------------------------------------------------------
# Règles internes
# ----------------------------------------------------------------

def _check_geofence(checkpoint: Checkpoint, coordinate: Optional[Coordinate]) -> None:
    if coordinate is None:
        raise MissingLocationError()

    distance = haversine_distance(
        coordinate.latitude,
        coordinate.longitude,
        checkpoint.expected_latitude,
        checkpoint.expected_longitude,
    )
    tolerance = checkpoint.tolerance_radius or settings.DEFAULT_TOLERANCE_METERS
    if distance > tolerance:
        raise OutOfRangeError(distance, tolerance)


def _next_status(current: str, round_completed: bool) -> RoundStatus:
    """COMPLETED si tous les points sont marqués, PENDING → IN_PROGRESS sinon, jamais de retour."""
    status = RoundStatus(current)
    if round_completed:
        return status.advance_to(RoundStatus.COMPLETED)
    if status == RoundStatus.PENDING:
        return status.advance_to(RoundStatus.IN_PROGRESS)
    return status


def _make_progress(current: int, total: int) -> RoundProgress:
    if total == 0:
        return RoundProgress(current=0, total=0, percentage=0)
    # Arrondi au demi supérieur (12,5 % → 13 %)
    percentage = int(math.floor(current / total * 100 + 0.5))
    return RoundProgress(current=current, total=total, percentage=percentage)
