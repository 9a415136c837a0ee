"""User service: lookups and idempotent creation."""

import logging

from sqlalchemy.orm import Session

from ..database import transaction
from ..models import User
from ..repositories import UserRepository
from ..schemas.user import UserCreate
from .pagination import Page, offset_for, validate_page_params

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def get_user(self, user_id: int) -> User:
        return self.user_repo.get_by_id(user_id)

    def list_users(self, page: int = 1, limit: int = 10) -> Page[User]:
        validate_page_params(page, limit)
        return Page(
            data=self.user_repo.get_all(skip=offset_for(page, limit), limit=limit),
            total=self.user_repo.count(),
            page=page,
            limit=limit,
        )

    def ensure_user(self, data: UserCreate) -> User:
        """Return the user with this email, creating it if needed."""
        existing = self.user_repo.get_by_email(data.email)
        if existing:
            return existing
        with transaction(self.db):
            user = self.user_repo.create(data)
        logger.info("User created", extra={"user_id": user.id})
        return user
