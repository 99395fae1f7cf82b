from sqlalchemy.orm import Session
from typing import Iterable, List, Optional

from .. import models


class CRUDProvider:
    def get_offerings_by_specialty(self, db: Session, specialty_id: str) -> List[models.ProviderService]:
        return (
            db.query(models.ProviderService)
            .filter(models.ProviderService.specialty_id == specialty_id)
            .all()
        )

    def get_offerings_by_sub_service(self, db: Session, sub_service_id: str) -> List[models.ProviderService]:
        return (
            db.query(models.ProviderService)
            .filter(models.ProviderService.sub_service_id == sub_service_id)
            .all()
        )

    def get_offerings_by_service(self, db: Session, service_id: str) -> List[models.ProviderService]:
        return (
            db.query(models.ProviderService)
            .filter(models.ProviderService.service_id == service_id)
            .all()
        )

    def get_provider(self, db: Session, provider_id: str) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.id == provider_id).first()

    def get_settings(self, db: Session, provider_id: str) -> Optional[models.ProviderSettings]:
        return (
            db.query(models.ProviderSettings)
            .filter(models.ProviderSettings.provider_id == provider_id)
            .first()
        )

    def get_item_prices(
        self, db: Session, provider_ids: Iterable[str], item_ids: Iterable[str]
    ) -> List[models.ProviderItemPrice]:
        provider_ids = list(provider_ids)
        item_ids = list(item_ids)
        if not provider_ids or not item_ids:
            return []
        return (
            db.query(models.ProviderItemPrice)
            .filter(models.ProviderItemPrice.provider_id.in_(provider_ids))
            .filter(models.ProviderItemPrice.item_id.in_(item_ids))
            .all()
        )

    def get_specialty_names(self, db: Session, provider_id: str) -> List[str]:
        rows = (
            db.query(models.Specialty.name)
            .join(models.ProviderService, models.ProviderService.specialty_id == models.Specialty.id)
            .filter(models.ProviderService.provider_id == provider_id)
            .order_by(models.Specialty.name)
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

    def get_portfolio(self, db: Session, provider_id: str) -> List[models.ProviderPortfolioItem]:
        return (
            db.query(models.ProviderPortfolioItem)
            .filter(models.ProviderPortfolioItem.provider_id == provider_id)
            .order_by(models.ProviderPortfolioItem.created_at)
            .all()
        )

provider = CRUDProvider()
