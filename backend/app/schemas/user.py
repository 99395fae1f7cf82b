# backend/app/schemas/user.py

from pydantic import BaseModel, field_validator
from typing import Optional

from ..models.user import UserRole


class UserBase(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole = UserRole.CLIENT
    avatar_url: Optional[str] = None


class UserResponse(UserBase):
    id: str

    model_config = {
        "from_attributes": True
    }


class UserProfileResponse(UserResponse):
    """Current user's profile card."""

    initials: str
    account_type_label: str
    # Only set for providers
    average_rating: Optional[float] = None


class UserProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("name", "phone", mode="before")
    def strip_whitespace(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class UserListItem(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole
    role_label: str
