import logging
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..crud import crud_quote, crud_user
from ..database import get_db
from ..models.user import User
from ..schemas.user import UserProfileResponse, UserProfileUpdate
from ..utils import error_response
from ..utils.profile import account_type_label, get_initials, is_provider
from .dependencies import get_current_user

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


def _profile_payload(db: Session, user: User) -> UserProfileResponse:
    return UserProfileResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        phone=user.phone,
        role=user.role,
        avatar_url=user.avatar_url,
        initials=get_initials(user.name, user.email),
        account_type_label=account_type_label(user.role),
        average_rating=crud_quote.get_average_rating(db, user.id) if is_provider(user.role) else None,
    )


@router.get("/users/me", response_model=UserProfileResponse)
def read_me(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
) -> Any:
    return _profile_payload(db, current_user)


@router.patch("/users/me", response_model=UserProfileResponse)
def update_me(
    profile_in: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """PATCH /api/v1/users/me: name, phone and avatar; omitted fields are kept."""
    if profile_in.name is not None and not profile_in.name:
        raise error_response(
            "Name cannot be empty.",
            {"name": "required"},
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    updated = crud_user.user.update_profile(
        db,
        current_user,
        name=profile_in.name,
        phone=profile_in.phone,
        avatar_url=profile_in.avatar_url,
    )
    logger.info("Profile updated for user %s", updated.id)
    return _profile_payload(db, updated)
