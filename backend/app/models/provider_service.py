# backend/app/models/provider_service.py
from sqlalchemy import Column, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id


class ProviderService(BaseModel):
    """A catalog entry a provider offers, with their base price.

    The offering may be registered at any catalog depth; ``specialty_id`` and
    ``sub_service_id`` stay null when the provider offers the whole service.
    """

    __tablename__ = "provider_services"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    provider_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=True, index=True)
    sub_service_id = Column(String(36), ForeignKey("sub_services.id", ondelete="CASCADE"), nullable=True, index=True)
    specialty_id = Column(String(36), ForeignKey("specialties.id", ondelete="CASCADE"), nullable=True, index=True)
    base_price = Column(Numeric(10, 2), nullable=False, default=0)

    provider = relationship("User", back_populates="provider_services")


class ProviderItemPrice(BaseModel):
    """Provider-specific unit price for a catalog item."""

    __tablename__ = "provider_item_prices"
    __table_args__ = (
        UniqueConstraint("provider_id", "item_id", name="uq_provider_item_price"),
    )

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    provider_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_id = Column(
        String(36),
        ForeignKey("service_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    price_per_unit = Column(Numeric(10, 2), nullable=False)
