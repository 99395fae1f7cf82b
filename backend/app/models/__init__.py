from .user import User, UserRole
from .provider_settings import ProviderSettings
from .service import Service, SubService, Specialty
from .service_question import ServiceQuestion, QuestionOption
from .service_item import ServiceItem, ServiceItemType
from .provider_service import ProviderService, ProviderItemPrice
from .provider_portfolio import ProviderPortfolioItem
from .quote import Quote, QuoteStatus, QuoteProvider, QuoteProviderStatus

__all__ = [
    "User",
    "UserRole",
    "ProviderSettings",
    "Service",
    "SubService",
    "Specialty",
    "ServiceQuestion",
    "QuestionOption",
    "ServiceItem",
    "ServiceItemType",
    "ProviderService",
    "ProviderItemPrice",
    "ProviderPortfolioItem",
    "Quote",
    "QuoteStatus",
    "QuoteProvider",
    "QuoteProviderStatus",
]
