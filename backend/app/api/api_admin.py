from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..schemas.user import UserListItem
from ..services import user_directory
from .dependencies import get_current_admin

router = APIRouter(tags=["admin"])


@router.get("/users", response_model=List[UserListItem])
def list_users(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    _admin: User = Depends(get_current_admin),
):
    """All registered users, newest first, optionally filtered by ``search``."""
    return user_directory.filter_users(user_directory.list_users(db), search)
