# app/api/api_provider.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..crud import crud_quote
from ..database import get_db
from ..models.user import User
from ..schemas.provider_match import (
    ProviderDetails,
    ProviderMatch,
    ProviderRating,
    QuoteDetails,
    SendQuoteResult,
)
from ..services import provider_match_service
from ..utils import error_response
from .dependencies import get_optional_user

router = APIRouter(tags=["Providers"])
logger = logging.getLogger(__name__)

_SEND_QUOTE_STATUS = {
    "login_required": status.HTTP_401_UNAUTHORIZED,
    "missing_quote_id": status.HTTP_400_BAD_REQUEST,
    "quote_not_found": status.HTTP_404_NOT_FOUND,
    "provider_not_found": status.HTTP_404_NOT_FOUND,
    "already_sent": status.HTTP_409_CONFLICT,
    "error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.post("/match", response_model=List[ProviderMatch])
def match_providers(details: QuoteDetails, db: Session = Depends(get_db)):
    """Rank providers able to fulfil the quote request.

    Always answers 200; an empty list means nobody matched or the lookup
    failed.
    """
    return provider_match_service.find_matching_providers(db, details)


@router.get("/{provider_id}", response_model=ProviderDetails)
def read_provider(provider_id: str, db: Session = Depends(get_db)):
    details = provider_match_service.get_provider_details(db, provider_id)
    if details is None:
        raise error_response(
            "Provider not found",
            {"provider_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return details


@router.get("/{provider_id}/rating", response_model=ProviderRating)
def read_provider_rating(provider_id: str, db: Session = Depends(get_db)):
    return ProviderRating(
        provider_id=provider_id,
        average_rating=crud_quote.get_average_rating(db, provider_id),
    )


@router.post("/{provider_id}/quotes", response_model=SendQuoteResult)
def send_quote(
    provider_id: str,
    details: QuoteDetails,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Forward the caller's quote to ``provider_id``.

    The authenticated user, when present, is the client; anonymous callers
    get ``requires_login`` back.
    """
    if current_user is not None:
        details = details.model_copy(update={"client_id": current_user.id})
    else:
        details = details.model_copy(update={"client_id": None})
    result = provider_match_service.send_quote_to_provider(db, details, provider_id)
    if result.success:
        return result
    code = _SEND_QUOTE_STATUS.get(result.reason, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=code, content=result.model_dump())
