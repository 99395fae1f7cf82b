# backend/app/models/provider_settings.py

from sqlalchemy import Column, String, Text, Float, ForeignKey
from sqlalchemy.orm import relationship

from .base import BaseModel


class ProviderSettings(BaseModel):
    """Where a provider works and how far they travel.

    ``service_radius_km == 0`` means the provider serves every location.
    """

    __tablename__ = "provider_settings"

    provider_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    bio = Column(Text, nullable=True)
    service_radius_km = Column(Float, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    city = Column(String, nullable=True)
    neighborhood = Column(String, nullable=True)

    provider = relationship("User", back_populates="provider_settings")
