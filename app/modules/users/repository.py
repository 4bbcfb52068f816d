# app/modules/users/repository.py
from typing import Optional
from sqlalchemy import and_
from sqlalchemy.orm import Session

from app.shared.database.models import User

class UsersRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Obtener usuario activo (no eliminado) por ID"""
        return self.db.query(User).filter(
            and_(
                User.id == user_id,
                User.deleted_at.is_(None)
            )
        ).first()
