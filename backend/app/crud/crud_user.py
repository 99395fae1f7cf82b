from sqlalchemy.orm import Session
from typing import List, Optional

from .. import models


class CRUDUser:
    def get_user(self, db: Session, user_id: str) -> Optional[models.User]:
        return db.query(models.User).filter(models.User.id == user_id).first()

    def get_users(self, db: Session) -> List[models.User]:
        """Return every profile, newest first."""
        return db.query(models.User).order_by(models.User.created_at.desc()).all()

    def update_profile(
        self,
        db: Session,
        db_user: models.User,
        *,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> models.User:
        if name is not None:
            db_user.name = name
        if phone is not None:
            db_user.phone = phone
        if avatar_url is not None:
            db_user.avatar_url = avatar_url
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

user = CRUDUser()
