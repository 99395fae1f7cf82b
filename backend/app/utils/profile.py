from typing import Optional

from app.models.user import UserRole

ROLE_LABELS = {
    UserRole.ADMIN: "Administrador",
    UserRole.PROVIDER: "Prestador",
    UserRole.CLIENT: "Cliente",
}

ACCOUNT_TYPE_LABELS = {
    UserRole.ADMIN: "Administrador",
    UserRole.PROVIDER: "Prestador de serviços",
    UserRole.CLIENT: "Cliente",
}


def get_initials(name: Optional[str], email: Optional[str]) -> str:
    """Return up to two upper-case initials for the avatar fallback.

    Uses the first letter of the first two name parts; without a name, the
    first two characters of the email.
    """
    parts = (name or "").split()
    if parts:
        return "".join(part[0] for part in parts[:2]).upper()
    return (email or "")[:2].upper()


def role_label(role: Optional[UserRole]) -> str:
    return ROLE_LABELS.get(role, ROLE_LABELS[UserRole.CLIENT])


def account_type_label(role: Optional[UserRole]) -> str:
    return ACCOUNT_TYPE_LABELS.get(role, ACCOUNT_TYPE_LABELS[UserRole.CLIENT])


def is_provider(role: Optional[UserRole]) -> bool:
    return role == UserRole.PROVIDER
