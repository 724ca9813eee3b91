"""
Modèles SQLAlchemy pour les parcours de ronde et leurs points de contrôle.

Données de référence : créées par configuration, jamais modifiées pendant une ronde.
L'ordre de passage d'un parcours est l'ordre croissant des identifiants de points.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from app.database import Base


class Route(Base):
    """Parcours ordonné de points de contrôle rattaché à un poste."""
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Checkpoint(Base):
    """Point de contrôle physique, identifié par un QR code portant son nom."""
    __tablename__ = "checkpoints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(Integer, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(100), unique=True, nullable=False)  # Ex: "E1-P1"
    description = Column(Text, nullable=True)

    # Géorepérage optionnel : NULL = pas de contrôle de position
    expected_latitude = Column(Float, nullable=True)
    expected_longitude = Column(Float, nullable=True)
    tolerance_radius = Column(Float, nullable=True)  # mètres, NULL = valeur par défaut

    created_at = Column(DateTime, server_default=func.now())

    @property
    def has_expected_location(self) -> bool:
        return self.expected_latitude is not None and self.expected_longitude is not None
