"""
Configuration partagée pour tous les tests.

- client     : client HTTP avec la dépendance get_db remplacée par un MagicMock
               (aucune connexion réelle à PostgreSQL, services patchés dans les tests API)
- db_session : session SQLAlchemy sur une base SQLite en mémoire, schéma complet
- patrol     : fabrique de données (garde, poste, parcours, points, ronde)
"""

import itertools
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401 : enregistre toutes les tables dans Base.metadata
from app.database import Base, get_db
from app.main import app
from app.models.guard import Guard
from app.models.post import Post
from app.models.round import Round
from app.models.route import Checkpoint, Route


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """Session sur une base SQLite en mémoire, recréée pour chaque test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def patrol(db_session):
    """
    Fabrique un scénario de ronde complet et le persiste.

    points    : noms des points de contrôle, créés dans cet ordre (identifiants croissants)
    locations : {nom: (latitude, longitude, rayon)} pour les points géorepérés
    """
    counter = itertools.count(1)

    def _make(points=("P1", "P2", "P3"), locations=None, status="PENDING", round_id=None):
        n = next(counter)
        locations = locations or {}

        guard = Guard(rut=f"1111111{n}-K", first_name="Juan", last_name=f"Pérez {n}")
        post = Post(name=f"Portería {n}", facilities="Acceso principal")
        db_session.add_all([guard, post])
        db_session.flush()

        route = Route(post_id=post.id, name=f"Ronda perimetral {n}")
        db_session.add(route)
        db_session.flush()

        checkpoints = []
        for name in points:
            lat, lon, radius = locations.get(name, (None, None, None))
            cp = Checkpoint(
                route_id=route.id,
                name=name if n == 1 else f"{name}-{n}",
                expected_latitude=lat,
                expected_longitude=lon,
                tolerance_radius=radius,
            )
            db_session.add(cp)
            db_session.flush()  # identifiants croissants dans l'ordre de création
            checkpoints.append(cp)

        rnd = Round(
            id=round_id,
            guard_id=guard.id,
            route_id=route.id,
            scheduled_date=date.today(),
            status=status,
        )
        db_session.add(rnd)
        db_session.commit()

        return SimpleNamespace(guard=guard, post=post, route=route, checkpoints=checkpoints, round=rnd)

    return _make
