"""Admin user listing and search."""

from typing import Iterable, List

from sqlalchemy.orm import Session

from ..crud import crud_user
from ..models.user import UserRole
from ..schemas.user import UserListItem
from ..utils.profile import role_label


def list_users(db: Session) -> List[UserListItem]:
    """All profiles, newest first. Missing emails fall back to the user id."""
    items = []
    for user in crud_user.user.get_users(db):
        role = user.role or UserRole.CLIENT
        items.append(
            UserListItem(
                id=user.id,
                email=user.email or user.id,
                name=user.name or "",
                role=role,
                role_label=role_label(role),
            )
        )
    return items


def filter_users(users: Iterable[UserListItem], search_term: str | None) -> List[UserListItem]:
    """Case-insensitive substring match on name, email or role."""
    needle = (search_term or "").strip().lower()
    if not needle:
        return list(users)
    return [
        u
        for u in users
        if needle in u.name.lower()
        or needle in u.email.lower()
        or needle in u.role.value.lower()
    ]
