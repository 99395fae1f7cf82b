from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.quote import Quote, QuoteProvider, QuoteProviderStatus


def get_quote(db: Session, quote_id: str) -> Optional[Quote]:
    return db.query(Quote).filter(Quote.id == quote_id).first()


def get_quote_provider(db: Session, quote_id: str, provider_id: str) -> Optional[QuoteProvider]:
    return (
        db.query(QuoteProvider)
        .filter(QuoteProvider.quote_id == quote_id)
        .filter(QuoteProvider.provider_id == provider_id)
        .first()
    )


def get_average_rating(db: Session, provider_id: str) -> float:
    """Mean of all non-null ratings left on the provider's quotes, 0 when none."""
    value = (
        db.query(func.avg(Quote.rating))
        .filter(Quote.provider_id == provider_id)
        .filter(Quote.rating.isnot(None))
        .scalar()
    )
    return float(value) if value is not None else 0.0


def add_quote_provider(db: Session, quote_id: str, provider_id: str) -> QuoteProvider:
    link = QuoteProvider(
        quote_id=quote_id,
        provider_id=provider_id,
        status=QuoteProviderStatus.PENDING,
    )
    db.add(link)
    db.commit()
    db.refresh(link)
    return link
