from sqlalchemy import Column, String, ForeignKey, Enum as SQLAlchemyEnum
from .base import BaseModel, new_id
import enum


class ServiceItemType(str, enum.Enum):
    """How an item is counted in a quote."""

    QUANTITY = "quantity"
    SQUARE_METER = "square_meter"
    LINEAR_METER = "linear_meter"


class ServiceItem(BaseModel):
    __tablename__ = "service_items"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    name = Column(String, nullable=False)
    type = Column(
        SQLAlchemyEnum(
            ServiceItemType,
            values_callable=lambda enum: [e.value for e in enum],
            native_enum=False,
        ),
        nullable=False,
        default=ServiceItemType.QUANTITY,
    )
    service_id = Column(String(36), ForeignKey("services.id", ondelete="CASCADE"), nullable=True, index=True)
    sub_service_id = Column(String(36), ForeignKey("sub_services.id", ondelete="CASCADE"), nullable=True, index=True)
    specialty_id = Column(String(36), ForeignKey("specialties.id", ondelete="CASCADE"), nullable=True, index=True)
