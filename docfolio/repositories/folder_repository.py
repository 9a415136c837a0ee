"""Folder repository for database operations."""

from typing import List, Optional

from sqlalchemy.orm import Query

from ..models import Document, Folder
from ..exceptions import FolderNotFoundError
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Repository for folder CRUD operations.

    Deleting folders never cascades to documents: callers detach the
    contained documents first (see FolderService).
    """

    model_class = Folder
    not_found_error = FolderNotFoundError

    def _owned_by(self, user_id: int, search: Optional[str] = None) -> Query:
        query = self._base_query().filter(Folder.folders_user_id == user_id)
        return self._name_contains(query, search)

    def create(self, name: str, user_id: int) -> Folder:
        folder = Folder(name=name, folders_user_id=user_id)
        self.db.add(folder)
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def count_by_owner(self, user_id: int, search: Optional[str] = None) -> int:
        return self._owned_by(user_id, search).count()

    def find_by_owner(
        self,
        user_id: int,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        skip: int = 0,
    ) -> List[Folder]:
        """Folders of *user_id*, newest first, from position *skip*."""
        query = (
            self._owned_by(user_id, search)
            .order_by(Folder.created_at.desc(), Folder.id.desc())
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def existing_names(self, user_id: int, names: List[str]) -> List[str]:
        """Subset of *names* already used by folders of *user_id*."""
        if not names:
            return []
        rows = (
            self._owned_by(user_id)
            .filter(Folder.name.in_(names))
            .with_entities(Folder.name)
            .all()
        )
        return [row[0] for row in rows]

    def rename(self, folder: Folder, name: str) -> Folder:
        folder.name = name
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def detach_documents(self, folder_ids: List[int]) -> int:
        """Unfile every document in the given folders. Returns rows updated."""
        if not folder_ids:
            return 0
        return (
            self.db.query(Document)
            .filter(Document.folder_document_id.in_(folder_ids))
            .update({Document.folder_document_id: None}, synchronize_session=False)
        )

    def delete_many(self, folder_ids: List[int]) -> int:
        if not folder_ids:
            return 0
        return (
            self._base_query()
            .filter(Folder.id.in_(folder_ids))
            .delete(synchronize_session=False)
        )
