# backend/app/models/quote.py
from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    ForeignKey,
    Text,
    UniqueConstraint,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id
import enum


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QuoteProviderStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Quote(BaseModel):
    """A client's request; ``rating`` is filled in once the job is done."""

    __tablename__ = "quotes"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    client_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    provider_id = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    service_id = Column(String(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    sub_service_id = Column(String(36), ForeignKey("sub_services.id", ondelete="SET NULL"), nullable=True)
    specialty_id = Column(String(36), ForeignKey("specialties.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)

    street = Column(String, nullable=True)
    number = Column(String, nullable=True)
    complement = Column(String, nullable=True)
    neighborhood = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)

    status = Column(
        SQLAlchemyEnum(
            QuoteStatus,
            values_callable=lambda enum: [e.value for e in enum],
            native_enum=False,
        ),
        nullable=False,
        default=QuoteStatus.PENDING,
    )
    total_price = Column(Numeric(10, 2), nullable=True)
    rating = Column(Integer, nullable=True)

    providers = relationship(
        "QuoteProvider",
        back_populates="quote",
        cascade="all, delete-orphan",
    )


class QuoteProvider(BaseModel):
    """A quote forwarded to one provider."""

    __tablename__ = "quote_providers"
    __table_args__ = (
        UniqueConstraint("quote_id", "provider_id", name="uq_quote_provider"),
    )

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    quote_id = Column(
        String(36),
        ForeignKey("quotes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        SQLAlchemyEnum(
            QuoteProviderStatus,
            values_callable=lambda enum: [e.value for e in enum],
            native_enum=False,
        ),
        nullable=False,
        default=QuoteProviderStatus.PENDING,
    )

    quote = relationship("Quote", back_populates="providers")
