"""
Modèles SQLAlchemy pour l'activité terrain des gardes :
contrôles de présence, main courante et alertes de panique.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, func

from app.database import Base


class PresenceCheck(Base):
    """Pointage de présence avec la position GPS du téléphone."""
    __tablename__ = "presence_checks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    checked_at = Column(DateTime, server_default=func.now())


class LogbookEntry(Base):
    """Entrée de main courante : observation, incident ou simple notification."""
    __tablename__ = "logbook_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    entry_type = Column(String(20), nullable=False)  # OBSERVATION, INCIDENT, NOTIFICATION
    description = Column(Text, nullable=False)
    photo = Column(Text, nullable=True)  # image encodée en base64 par l'app mobile
    created_at = Column(DateTime, server_default=func.now())


class PanicAlert(Base):
    __tablename__ = "panic_alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
