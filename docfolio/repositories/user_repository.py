"""User repository for database operations."""

from typing import Optional

from ..models import User
from ..schemas.user import UserCreate
from ..exceptions import UserNotFoundError
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user lookups and creation."""

    model_class = User
    not_found_error = UserNotFoundError

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def create(self, user: UserCreate) -> User:
        db_user = User(email=user.email, name=user.name)
        self.db.add(db_user)
        self.db.flush()
        self.db.refresh(db_user)
        return db_user
