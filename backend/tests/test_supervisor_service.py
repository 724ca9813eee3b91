"""
Tests unitaires du tableau de bord superviseur (SQLite en mémoire).
"""

import pytest

from app.models.activity import PresenceCheck
from app.services.round_service import submit_mark
from app.services.shift_service import start_shift
from app.services.supervisor_service import get_guard_profile, get_guards_overview


def overview_of(db, guard_id):
    return next(g for g in get_guards_overview(db) if g.id == guard_id)


# ============================================================
# get_guards_overview
# ============================================================

def test_garde_inactif_sans_ronde_active(db_session, patrol):
    p = patrol()

    row = overview_of(db_session, p.guard.id)

    assert row.is_active is False
    assert row.post_id is None
    assert row.last_location is None
    assert row.progress.text == "Aucune ronde active"
    assert row.progress.percentage == 0


def test_garde_en_service_ronde_a_demarrer(db_session, patrol):
    p = patrol()
    start_shift(db_session, p.guard.id, p.post.id)

    row = overview_of(db_session, p.guard.id)

    assert row.is_active is True
    assert row.post_id == p.post.id
    assert row.progress.text == "À démarrer (3 points)"
    assert row.progress.status == "PENDING"
    assert row.progress.round_id == p.round.id


def test_garde_en_service_ronde_en_cours(db_session, patrol):
    p = patrol()
    start_shift(db_session, p.guard.id, p.post.id)
    submit_mark(db_session, p.round.id, "P1")

    row = overview_of(db_session, p.guard.id)

    assert row.progress.text == "1/3 points"
    assert row.progress.percentage == 33
    assert row.progress.status == "IN_PROGRESS"


def test_ronde_terminee_n_est_plus_active(db_session, patrol):
    p = patrol(points=("P1",))
    start_shift(db_session, p.guard.id, p.post.id)
    submit_mark(db_session, p.round.id, "P1")

    row = overview_of(db_session, p.guard.id)
    assert row.progress.text == "Aucune ronde active"


def test_derniere_position_connue(db_session, patrol):
    p = patrol()
    db_session.add_all([
        PresenceCheck(guard_id=p.guard.id, post_id=p.post.id, latitude=1.0, longitude=1.0),
        PresenceCheck(guard_id=p.guard.id, post_id=p.post.id, latitude=2.0, longitude=3.0),
    ])
    db_session.commit()

    row = overview_of(db_session, p.guard.id)

    assert (row.last_location.latitude, row.last_location.longitude) == (2.0, 3.0)


def test_tous_les_gardes_listes(db_session, patrol):
    patrol()
    patrol()
    assert len(get_guards_overview(db_session)) == 2


# ============================================================
# get_guard_profile
# ============================================================

def test_fiche_garde_avec_controles_recents(db_session, patrol):
    p = patrol()
    for i in range(25):
        db_session.add(PresenceCheck(guard_id=p.guard.id, post_id=p.post.id, latitude=float(i), longitude=0.0))
    db_session.commit()

    profile = get_guard_profile(db_session, p.guard.id)

    assert profile.guard.rut == p.guard.rut
    assert len(profile.recent_checks) == 20
    assert profile.recent_checks[0].latitude == 24.0


def test_fiche_garde_introuvable(db_session):
    with pytest.raises(ValueError, match="introuvable"):
        get_guard_profile(db_session, 31)
