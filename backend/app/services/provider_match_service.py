"""Provider matching and ranking for a client's quote request.

`find_matching_providers` resolves the providers offering the requested
catalog entry, prices the request for each of them and orders the result:

1. providers serving the client's location come first,
2. then by relevance (3 = specialty, 2 = sub-service, 1 = service match),
3. then by ascending distance, unknown distances last.

Data-fetch problems never propagate: a failing provider is logged and
skipped, and a failure before any provider is processed yields ``[]``.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..crud import crud_quote
from ..crud.crud_provider import provider as crud_provider
from ..models.provider_service import ProviderService
from ..schemas.provider_match import (
    PortfolioItem,
    ProviderDetails,
    ProviderInfo,
    ProviderMatch,
    QuoteDetails,
    SendQuoteResult,
)
from .distance_service import distance_km, is_within_radius
from .geocode import GeocodeResult, geocode_address
from .quote_pricing import compute_total_price

logger = logging.getLogger(__name__)

RELEVANCE_SPECIALTY = 3
RELEVANCE_SUB_SERVICE = 2
RELEVANCE_SERVICE = 1

Geocoder = Callable[[str], Optional[GeocodeResult]]


def resolve_offerings(db: Session, details: QuoteDetails) -> List[ProviderService]:
    """Offerings for the most specific catalog level that has any.

    Levels are tried specialty, sub-service, service; the first non-empty
    one wins and levels are never merged.
    """
    if details.specialty_id:
        rows = crud_provider.get_offerings_by_specialty(db, details.specialty_id)
        if rows:
            return rows
    if details.sub_service_id:
        rows = crud_provider.get_offerings_by_sub_service(db, details.sub_service_id)
        if rows:
            return rows
    if details.service_id:
        rows = crud_provider.get_offerings_by_service(db, details.service_id)
        if rows:
            return rows
    return []


def relevance_tier(offering: ProviderService, details: QuoteDetails) -> int:
    if details.specialty_id and offering.specialty_id == details.specialty_id:
        return RELEVANCE_SPECIALTY
    if details.sub_service_id and offering.sub_service_id == details.sub_service_id:
        return RELEVANCE_SUB_SERVICE
    return RELEVANCE_SERVICE


def _best_offering_per_provider(
    offerings: Iterable[ProviderService], details: QuoteDetails
) -> Dict[str, ProviderService]:
    """Keep one offering per provider: most relevant, then cheapest."""
    best: Dict[str, ProviderService] = {}
    for offering in offerings:
        current = best.get(offering.provider_id)
        if current is None:
            best[offering.provider_id] = offering
            continue
        candidate_key = (-relevance_tier(offering, details), Decimal(offering.base_price or 0))
        current_key = (-relevance_tier(current, details), Decimal(current.base_price or 0))
        if candidate_key < current_key:
            best[offering.provider_id] = offering
    return best


def match_sort_key(match: ProviderMatch):
    distance = match.distance_km if match.distance_km is not None else math.inf
    return (not match.is_within_radius, -match.relevance, distance)


def _load_item_prices(
    db: Session, provider_ids: List[str], details: QuoteDetails
) -> Dict[str, Dict[str, Decimal]]:
    """provider id -> {item id -> unit price}; empty on failure."""
    if not details.items:
        return {}
    try:
        rows = crud_provider.get_item_prices(db, provider_ids, details.items.keys())
    except SQLAlchemyError as exc:
        logger.error("Error fetching provider item prices: %s", exc)
        db.rollback()
        return {}
    prices: Dict[str, Dict[str, Decimal]] = {}
    for row in rows:
        prices.setdefault(row.provider_id, {})[row.item_id] = row.price_per_unit
    return prices


def _geocode_client(details: QuoteDetails, geocoder: Geocoder) -> Optional[GeocodeResult]:
    address = details.address.full_address()
    try:
        location = geocoder(address)
    except Exception as exc:
        logger.warning("Could not geocode client address %r: %s", address, exc)
        return None
    if location is None:
        logger.warning("Could not geocode client address %r; distances unknown", address)
    return location


def _build_match(
    db: Session,
    offering: ProviderService,
    details: QuoteDetails,
    client_location: Optional[GeocodeResult],
    item_prices: Dict[str, Decimal],
) -> Optional[ProviderMatch]:
    user = crud_provider.get_provider(db, offering.provider_id)
    if user is None:
        logger.warning("Offering %s points at missing provider %s", offering.id, offering.provider_id)
        return None

    provider_settings = crud_provider.get_settings(db, user.id)
    radius = settings.DEFAULT_SERVICE_RADIUS_KM
    lat = lng = None
    bio = city = neighborhood = ""
    if provider_settings is not None:
        if provider_settings.service_radius_km is not None:
            radius = provider_settings.service_radius_km
        lat, lng = provider_settings.latitude, provider_settings.longitude
        bio = provider_settings.bio or ""
        city = provider_settings.city or ""
        neighborhood = provider_settings.neighborhood or ""

    has_coordinates = lat is not None and lng is not None
    distance = None
    if client_location is not None:
        distance = distance_km(client_location.lat, client_location.lng, lat, lng)

    total_price = compute_total_price(
        offering.base_price,
        items=details.items,
        measurements=details.measurements,
        item_prices=item_prices,
    )

    return ProviderMatch(
        provider=ProviderInfo(
            user_id=user.id,
            name=user.name or "",
            phone=user.phone,
            bio=bio,
            average_rating=crud_quote.get_average_rating(db, user.id),
            specialties=crud_provider.get_specialty_names(db, user.id),
            city=city,
            neighborhood=neighborhood,
        ),
        distance_km=distance,
        total_price=total_price,
        is_within_radius=is_within_radius(distance, radius, has_coordinates),
        relevance=relevance_tier(offering, details),
    )


def find_matching_providers(
    db: Session,
    details: QuoteDetails,
    geocoder: Optional[Geocoder] = None,
) -> List[ProviderMatch]:
    """Return ranked provider matches for ``details``; never raises."""
    geocoder = geocoder or geocode_address
    try:
        offerings = resolve_offerings(db, details)
        if not offerings:
            logger.info(
                "No providers found for request",
                extra={
                    "service_id": details.service_id,
                    "sub_service_id": details.sub_service_id,
                    "specialty_id": details.specialty_id,
                },
            )
            return []

        by_provider = _best_offering_per_provider(offerings, details)
        client_location = _geocode_client(details, geocoder)
        item_prices = _load_item_prices(db, list(by_provider), details)
    except Exception:
        logger.exception("Error finding matching providers")
        return []

    matches: List[ProviderMatch] = []
    for provider_id, offering in by_provider.items():
        try:
            match = _build_match(db, offering, details, client_location, item_prices.get(provider_id, {}))
        except Exception:
            logger.exception("Skipping provider %s after data fetch error", provider_id)
            db.rollback()
            continue
        if match is not None:
            matches.append(match)

    matches.sort(key=match_sort_key)
    return matches


def get_provider_details(db: Session, provider_id: str) -> Optional[ProviderDetails]:
    """Full provider card: profile, settings, portfolio and rating."""
    try:
        user = crud_provider.get_provider(db, provider_id)
        if user is None:
            logger.info("Provider %s not found", provider_id)
            return None
        provider_settings = crud_provider.get_settings(db, provider_id)
        average_rating = crud_quote.get_average_rating(db, provider_id)
        specialties = crud_provider.get_specialty_names(db, provider_id)
    except Exception:
        logger.exception("Error fetching provider details for %s", provider_id)
        db.rollback()
        return None

    try:
        portfolio = [PortfolioItem.model_validate(p) for p in crud_provider.get_portfolio(db, provider_id)]
    except Exception as exc:
        logger.error("Error fetching portfolio for %s: %s", provider_id, exc)
        db.rollback()
        portfolio = []

    try:
        info = ProviderInfo(
            user_id=user.id,
            name=user.name or "",
            phone=user.phone,
            bio=(provider_settings.bio if provider_settings else None) or "",
            average_rating=average_rating,
            specialties=specialties,
            city=(provider_settings.city if provider_settings else None) or "",
            neighborhood=(provider_settings.neighborhood if provider_settings else None) or "",
        )
        # Distance and price depend on a concrete request; callers fill them in.
        return ProviderDetails(
            provider=info,
            portfolio_items=portfolio,
            distance_km=0.0,
            total_price=Decimal("0"),
            rating=average_rating,
            is_within_radius=False,
        )
    except Exception:
        logger.exception("Error building provider details for %s", provider_id)
        return None


def _is_duplicate_link(exc: IntegrityError) -> bool:
    """True when the insert clashed with ``uq_quote_provider``, not a foreign key."""
    text = str(exc.orig).lower()
    return "uq_quote_provider" in text or "unique" in text


def _already_sent(quote_id: str, provider_id: str) -> SendQuoteResult:
    logger.warning("Quote %s already sent to provider %s", quote_id, provider_id)
    return SendQuoteResult(
        success=False,
        message="Quote already sent to this provider",
        quote_id=quote_id,
        reason="already_sent",
    )


def send_quote_to_provider(db: Session, details: QuoteDetails, provider_id: str) -> SendQuoteResult:
    """Forward an existing quote to a provider with status ``pending``."""
    if not details.client_id:
        logger.info("Client id not provided, login required")
        return SendQuoteResult(
            success=False, message="Login required", requires_login=True, reason="login_required"
        )

    quote_id = details.quote_id or ""
    if not quote_id:
        return SendQuoteResult(
            success=False, message="Quote id not provided", requires_login=True, reason="missing_quote_id"
        )

    try:
        if crud_quote.get_quote(db, quote_id) is None:
            return SendQuoteResult(success=False, message="Quote not found", reason="quote_not_found")
        if crud_provider.get_provider(db, provider_id) is None:
            return SendQuoteResult(
                success=False, message="Provider not found", quote_id=quote_id, reason="provider_not_found"
            )
        if crud_quote.get_quote_provider(db, quote_id, provider_id) is not None:
            return _already_sent(quote_id, provider_id)
        crud_quote.add_quote_provider(db, quote_id, provider_id)
    except IntegrityError as exc:
        db.rollback()
        if _is_duplicate_link(exc):
            return _already_sent(quote_id, provider_id)
        logger.exception("Integrity error linking quote %s to provider %s", quote_id, provider_id)
        return SendQuoteResult(success=False, message="Error sending quote to provider", reason="error")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error associating quote %s with provider %s", quote_id, provider_id)
        return SendQuoteResult(success=False, message="Error sending quote to provider", reason="error")

    logger.info("Quote %s sent to provider %s", quote_id, provider_id)
    return SendQuoteResult(success=True, message="Quote sent successfully", quote_id=quote_id)
