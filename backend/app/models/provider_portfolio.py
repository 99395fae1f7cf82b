from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel, new_id


class ProviderPortfolioItem(BaseModel):
    __tablename__ = "provider_portfolio"

    id = Column(String(36), primary_key=True, default=new_id, index=True)
    provider_id = Column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    provider = relationship("User", back_populates="portfolio_items")
