# backend/app/models/user.py

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id
import enum


class UserRole(str, enum.Enum):
    """Enumeration of all supported user roles."""

    CLIENT = "client"
    PROVIDER = "provider"
    ADMIN = "admin"

    @classmethod
    def _missing_(cls, value: object):
        """Map legacy enum values to current ones."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered == "service_provider":
                return cls.PROVIDER
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class User(BaseModel):
    """A person on the platform: client, provider or administrator."""

    __tablename__ = "profiles"

    id         = Column(String(36), primary_key=True, default=new_id, index=True)
    email      = Column(String, unique=True, index=True, nullable=True)
    name       = Column(String, nullable=True)
    phone      = Column(String, nullable=True)
    role       = Column(
        Enum(UserRole, values_callable=lambda enum: [e.value for e in enum], native_enum=False),
        nullable=False,
        default=UserRole.CLIENT,
    )
    avatar_url = Column(String, nullable=True)

    # ↔–↔ Providers keep their radius, coordinates and bio in one settings row
    provider_settings = relationship(
        "ProviderSettings",
        back_populates="provider",
        uselist=False,
        cascade="all, delete-orphan",
    )
    provider_services = relationship(
        "ProviderService",
        back_populates="provider",
        cascade="all, delete-orphan",
    )
    portfolio_items = relationship(
        "ProviderPortfolioItem",
        back_populates="provider",
        cascade="all, delete-orphan",
    )
