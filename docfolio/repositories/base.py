"""Base repository with shared get-by-ID and name-matching patterns.

Subclasses specify model_class and not_found_error; the base provides the
common implementations. Every repository is constructed with an explicit
Session so its lifecycle stays with the caller.
"""

from typing import TypeVar, Generic, Optional, Type
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import DocfolioException

ModelT = TypeVar("ModelT", bound=Base)

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching *term* anywhere, with wildcards escaped."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Document)
        not_found_error: Exception class to raise from get_by_id
    """

    model_class: Type[ModelT]
    not_found_error: Type[DocfolioException]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def get_by_id(self, entity_id: int) -> ModelT:
        """Get entity by primary key. Raises not_found_error if missing."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_by_id_optional(self, entity_id: int) -> Optional[ModelT]:
        """Get entity by primary key, or None if not found."""
        return self._base_query().filter(self.model_class.id == entity_id).first()

    def count(self) -> int:
        return self._base_query().count()

    def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelT]:
        """All rows, newest first."""
        return (
            self._base_query()
            .order_by(self.model_class.created_at.desc(), self.model_class.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def _name_contains(self, query: Query, search: Optional[str]) -> Query:
        """Filter *query* by a case-insensitive substring match on name.

        A missing or blank *search* leaves the query unfiltered.
        """
        term = search.strip() if search else ""
        if not term:
            return query
        return query.filter(
            self.model_class.name.ilike(contains_pattern(term), escape=LIKE_ESCAPE)
        )


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when *exc* was raised by a UNIQUE constraint.

    SQLite reports ``UNIQUE constraint failed``; PostgreSQL reports
    ``duplicate key value violates unique constraint``.
    """
    message = str(getattr(exc, "orig", exc)).lower()
    return "unique" in message or "duplicate key" in message
