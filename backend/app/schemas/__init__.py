from .user import UserBase, UserResponse, UserProfileResponse, UserProfileUpdate, UserListItem
from .catalog import (
    SpecialtyRead,
    SubServiceRead,
    ServiceRead,
    QuestionOptionRead,
    ServiceQuestionRead,
    ServiceItemRead,
)
from .provider_match import (
    Address,
    Measurement,
    QuoteDetails,
    ProviderInfo,
    ProviderMatch,
    PortfolioItem,
    ProviderDetails,
    ProviderRating,
    SendQuoteResult,
)

__all__ = [
    "UserBase",
    "UserResponse",
    "UserProfileResponse",
    "UserProfileUpdate",
    "UserListItem",
    "SpecialtyRead",
    "SubServiceRead",
    "ServiceRead",
    "QuestionOptionRead",
    "ServiceQuestionRead",
    "ServiceItemRead",
    "Address",
    "Measurement",
    "QuoteDetails",
    "ProviderInfo",
    "ProviderMatch",
    "PortfolioItem",
    "ProviderDetails",
    "ProviderRating",
    "SendQuoteResult",
]
