"""Document repository for database operations.

Owns all document query logic. Listing queries order newest first with the
id as a tie-break so that page boundaries are stable.
"""

from typing import List, Optional

from sqlalchemy.orm import Query

from ..models import Document
from ..schemas.document import DocumentCreate
from ..exceptions import DocumentNotFoundError
from .base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for document CRUD operations."""

    model_class = Document
    not_found_error = DocumentNotFoundError

    def _owned_by(self, user_id: int, search: Optional[str] = None) -> Query:
        query = self._base_query().filter(Document.document_user_id == user_id)
        return self._name_contains(query, search)

    @staticmethod
    def _newest_first(query: Query) -> Query:
        return query.order_by(Document.created_at.desc(), Document.id.desc())

    def create(self, document: DocumentCreate) -> Document:
        """Create a new document. Flushes so uniqueness violations surface here."""
        db_document = Document(
            name=document.name,
            file_size=document.file_size,
            document_user_id=document.document_user_id,
            folder_document_id=document.folder_document_id,
        )
        self.db.add(db_document)
        self.db.flush()
        self.db.refresh(db_document)
        return db_document

    def count_by_owner(self, user_id: int, search: Optional[str] = None) -> int:
        return self._owned_by(user_id, search).count()

    def find_by_owner(
        self,
        user_id: int,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> List[Document]:
        """Documents of *user_id*, newest first, from position *skip*."""
        query = self._newest_first(self._owned_by(user_id, search)).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_by_folder(self, folder_id: int) -> int:
        return self._base_query().filter(Document.folder_document_id == folder_id).count()

    def find_by_folder(self, folder_id: int, skip: int = 0, limit: int = 100) -> List[Document]:
        query = self._base_query().filter(Document.folder_document_id == folder_id)
        return self._newest_first(query).offset(skip).limit(limit).all()

    def get_unfiled(self, user_id: int) -> List[Document]:
        """Documents of *user_id* that are not in any folder."""
        query = self._owned_by(user_id).filter(Document.folder_document_id.is_(None))
        return self._newest_first(query).all()

    def existing_names(self, user_id: int, names: List[str]) -> List[str]:
        """Subset of *names* already used by documents of *user_id*."""
        if not names:
            return []
        rows = (
            self._owned_by(user_id)
            .filter(Document.name.in_(names))
            .with_entities(Document.name)
            .all()
        )
        return [row[0] for row in rows]

    def update(self, document: Document, changes: dict) -> Document:
        """Apply *changes* (column -> value) to *document* and flush."""
        for column, value in changes.items():
            setattr(document, column, value)
        self.db.flush()
        self.db.refresh(document)
        return document

    def assign_to_folder(
        self,
        document_ids: List[int],
        folder_id: Optional[int],
        owner_id: Optional[int] = None,
        only_unfiled: bool = False,
    ) -> int:
        """Point the given documents at *folder_id* (None unfiles them).

        Returns the number of rows updated.
        """
        if not document_ids:
            return 0
        query = self._base_query().filter(Document.id.in_(document_ids))
        if owner_id is not None:
            query = query.filter(Document.document_user_id == owner_id)
        if only_unfiled:
            query = query.filter(Document.folder_document_id.is_(None))
        return query.update(
            {Document.folder_document_id: folder_id}, synchronize_session=False
        )

    def delete(self, document: Document) -> None:
        self.db.delete(document)
        self.db.flush()

    def delete_many(self, document_ids: List[int]) -> int:
        if not document_ids:
            return 0
        return (
            self._base_query()
            .filter(Document.id.in_(document_ids))
            .delete(synchronize_session=False)
        )
