"""
Modèles SQLAlchemy pour les postes de garde et les prises de service.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from app.database import Base


class Post(Base):
    """Poste de garde (site surveillé)."""
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    facilities = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Shift(Base):
    """Prise de service d'un garde sur un poste."""
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    guard_id = Column(Integer, ForeignKey("guards.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False)
    started_at = Column(DateTime, nullable=False)
    ended_at = Column(DateTime, nullable=True)  # NULL = service en cours
