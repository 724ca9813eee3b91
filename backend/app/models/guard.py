"""
Modèle SQLAlchemy pour les gardes de sécurité.
L'authentification est gérée en dehors de cette API : pas de mot de passe ici.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from app.database import Base


class Guard(Base):
    __tablename__ = "guards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rut = Column(String(12), unique=True, nullable=False)  # Ex: "12345678-9"
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=False)  # True = en service (poste ouvert)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
