"""
Modèle SQLAlchemy pour les notifications superviseur → garde.
Stockées en base et relevées par l'app mobile (pas de push).
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text, func

from app.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False)
    created_at = Column(DateTime, server_default=func.now())
