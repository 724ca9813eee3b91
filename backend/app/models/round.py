"""
Modèles SQLAlchemy pour les rondes et leurs marquages.

Le statut d'une ronde n'avance que dans un sens :
PENDING → IN_PROGRESS → COMPLETED. Il est stocké en texte mais manipulé
via RoundStatus, qui refuse toute régression.
"""

import enum

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Time,
    UniqueConstraint,
)

from app.database import Base


class RoundStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    def advance_to(self, target: "RoundStatus") -> "RoundStatus":
        """
        Retourne le nouveau statut si la transition est autorisée.
        Rester dans le même statut est permis ; revenir en arrière lève ValueError.
        """
        target = RoundStatus(target)
        if target.rank < self.rank:
            raise ValueError(f"Transition de statut interdite : {self.value} → {target.value}.")
        return target


_STATUS_ORDER = [RoundStatus.PENDING, RoundStatus.IN_PROGRESS, RoundStatus.COMPLETED]


class Round(Base):
    """Parcours planifié d'une route par un garde."""
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    route_id = Column(Integer, ForeignKey("routes.id"), nullable=True)
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(Time, nullable=True)
    status = Column(String(20), nullable=False, default=RoundStatus.PENDING.value)
    reminder_sent_at = Column(DateTime, nullable=True)  # rappel de retard déjà envoyé


class Marking(Base):
    """Scan validé d'un point de contrôle pendant une ronde (jamais modifié ni supprimé)."""
    __tablename__ = "markings"
    __table_args__ = (
        UniqueConstraint("round_id", "checkpoint_id", name="uq_marking_round_checkpoint"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    round_id = Column(Integer, ForeignKey("rounds.id", ondelete="CASCADE"), nullable=False)
    checkpoint_id = Column(Integer, ForeignKey("checkpoints.id"), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    marked_at = Column(DateTime, nullable=False)
