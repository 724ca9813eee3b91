"""
Tests unitaires du service d'activité terrain : présence, main courante, alerte de panique.
L'envoi d'email est toujours mocké.
"""

from unittest.mock import patch

import pytest

from app.models.activity import PanicAlert
from app.schemas.activity import LogbookEntryCreate, PanicAlertCreate, PresenceCheckCreate
from app.services.activity_service import (
    create_logbook_entry,
    list_logbook_entries,
    raise_panic_alert,
    record_presence_check,
)

SEND_EMAIL = "app.services.activity_service.send_panic_alert_email"
ALERT_EMAIL_TO = "app.services.activity_service.settings.ALERT_EMAIL_TO"


# ============================================================
# Contrôle de présence
# ============================================================

def test_controle_de_presence(db_session, patrol):
    p = patrol()
    check = record_presence_check(
        db_session,
        PresenceCheckCreate(guard_id=p.guard.id, post_id=p.post.id, latitude=-34.98, longitude=-71.23),
    )
    assert check.id is not None
    assert check.latitude == -34.98


def test_controle_de_presence_garde_introuvable(db_session, patrol):
    p = patrol()
    with pytest.raises(ValueError, match="introuvable"):
        record_presence_check(db_session, PresenceCheckCreate(guard_id=999, post_id=p.post.id))


# ============================================================
# Main courante
# ============================================================

def test_entree_main_courante(db_session, patrol):
    p = patrol()
    entry = create_logbook_entry(
        db_session,
        LogbookEntryCreate(guard_id=p.guard.id, entry_type="incident", description="Portail forcé"),
    )
    assert entry.entry_type == "INCIDENT"
    assert entry.description == "Portail forcé"


def test_type_inconnu_devient_notification():
    data = LogbookEntryCreate(guard_id=1, entry_type="autre", description="RAS")
    assert data.entry_type == "NOTIFICATION"


def test_description_vide_refusee():
    with pytest.raises(ValueError):
        LogbookEntryCreate(guard_id=1, entry_type="OBSERVATION", description="  ")


def test_main_courante_plus_recente_en_premier(db_session, patrol):
    p = patrol()
    for text in ("Première", "Deuxième"):
        create_logbook_entry(
            db_session,
            LogbookEntryCreate(guard_id=p.guard.id, entry_type="OBSERVATION", description=text),
        )

    entries = list_logbook_entries(db_session, p.guard.id)
    assert [e.description for e in entries] == ["Deuxième", "Première"]


# ============================================================
# Alerte de panique
# ============================================================

def test_alerte_enregistree_et_superviseur_prevenu(db_session, patrol):
    p = patrol()
    with patch(ALERT_EMAIL_TO, "supervision@example.com"), patch(SEND_EMAIL) as mock_send:
        result = raise_panic_alert(
            db_session,
            PanicAlertCreate(guard_id=p.guard.id, post_id=p.post.id, latitude=-34.98, longitude=-71.23),
        )

    assert result.supervisor_notified is True
    assert result.message == "Alerte enregistrée et superviseur prévenu."
    kwargs = mock_send.call_args.kwargs
    assert kwargs["to_email"] == "supervision@example.com"
    assert kwargs["post_name"] == p.post.name
    assert kwargs["guard_name"] == f"{p.guard.first_name} {p.guard.last_name}"


def test_alerte_sans_destinataire_configure(db_session, patrol):
    p = patrol()
    with patch(ALERT_EMAIL_TO, ""), patch(SEND_EMAIL) as mock_send:
        result = raise_panic_alert(
            db_session, PanicAlertCreate(guard_id=p.guard.id, latitude=0.0, longitude=0.0)
        )

    mock_send.assert_not_called()
    assert result.supervisor_notified is False
    assert result.message == "Alerte enregistrée."


def test_alerte_conservee_si_email_echoue(db_session, patrol):
    p = patrol()
    with patch(ALERT_EMAIL_TO, "supervision@example.com"), \
            patch(SEND_EMAIL, side_effect=OSError("SMTP indisponible")):
        result = raise_panic_alert(
            db_session, PanicAlertCreate(guard_id=p.guard.id, latitude=1.0, longitude=2.0)
        )

    assert result.supervisor_notified is False
    assert db_session.get(PanicAlert, result.id) is not None


def test_alerte_garde_introuvable(db_session):
    with pytest.raises(ValueError, match="introuvable"):
        raise_panic_alert(db_session, PanicAlertCreate(guard_id=77, latitude=1.0, longitude=2.0))
