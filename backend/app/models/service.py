# backend/app/models/service.py
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id


class Service(BaseModel):
    """Top level of the catalog, e.g. "Limpeza"."""

    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String, index=True, nullable=False)

    sub_services = relationship(
        "SubService",
        back_populates="service",
        cascade="all, delete-orphan",
    )


class SubService(BaseModel):
    __tablename__ = "sub_services"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String, index=True, nullable=False)
    service_id = Column(
        String(36),
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    service = relationship("Service", back_populates="sub_services")
    specialties = relationship(
        "Specialty",
        back_populates="sub_service",
        cascade="all, delete-orphan",
    )


class Specialty(BaseModel):
    __tablename__ = "specialties"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String, index=True, nullable=False)
    sub_service_id = Column(
        String(36),
        ForeignKey("sub_services.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sub_service = relationship("SubService", back_populates="specialties")
