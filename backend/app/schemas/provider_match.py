from decimal import Decimal
from typing import Optional, List, Dict, Annotated

from pydantic import BaseModel, Field, model_validator


class Address(BaseModel):
    street: str = ""
    number: str = ""
    complement: Optional[str] = None
    neighborhood: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def full_address(self) -> str:
        """Return the single-line form sent to the geocoder."""
        return ", ".join(
            [self.street, self.number, self.neighborhood, self.city, self.state, self.zip_code]
        )


class Measurement(BaseModel):
    """A surface or length to be worked on.

    ``area`` wins when given; otherwise ``width * length`` is used.
    """

    id: Optional[str] = None
    width: Optional[Annotated[float, Field(ge=0)]] = None
    length: Optional[Annotated[float, Field(ge=0)]] = None
    area: Optional[Annotated[float, Field(ge=0)]] = None


class QuoteDetails(BaseModel):
    service_id: Optional[str] = None
    service_name: Optional[str] = None
    sub_service_id: Optional[str] = None
    sub_service_name: Optional[str] = None
    specialty_id: Optional[str] = None
    specialty_name: Optional[str] = None
    description: Optional[str] = None
    address: Address = Field(default_factory=Address)
    # item id -> quantity
    items: Dict[str, Annotated[float, Field(ge=0)]] = Field(default_factory=dict)
    measurements: List[Measurement] = Field(default_factory=list)
    quote_id: Optional[str] = None
    client_id: Optional[str] = None

    @model_validator(mode="after")
    def catalog_level_required(cls, model: "QuoteDetails") -> "QuoteDetails":
        """At least one catalog identifier must be given."""
        if not (model.service_id or model.sub_service_id or model.specialty_id):
            raise ValueError(
                "One of service_id, sub_service_id or specialty_id must be provided."
            )
        return model


class ProviderInfo(BaseModel):
    user_id: str
    name: str = ""
    phone: Optional[str] = None
    bio: str = ""
    average_rating: float = 0.0
    specialties: List[str] = []
    city: str = ""
    neighborhood: str = ""


class ProviderMatch(BaseModel):
    provider: ProviderInfo
    # None when either side has no coordinates
    distance_km: Optional[float] = None
    total_price: Decimal = Decimal("0")
    is_within_radius: bool = False
    # 3 = specialty, 2 = sub-service, 1 = service-only match
    relevance: int = 1


class PortfolioItem(BaseModel):
    id: str
    image_url: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class ProviderDetails(ProviderMatch):
    portfolio_items: List[PortfolioItem] = []
    rating: float = 0.0


class ProviderRating(BaseModel):
    provider_id: str
    average_rating: float


class SendQuoteResult(BaseModel):
    success: bool
    message: str
    quote_id: Optional[str] = None
    requires_login: bool = False
    # login_required | missing_quote_id | quote_not_found | provider_not_found |
    # already_sent | error
    reason: Optional[str] = None
