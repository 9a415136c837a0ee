"""Folder service: creation, rename, lookups and detach-then-delete.

Deleting a folder never deletes documents. Its documents are unfiled first,
and the detach and the delete commit together in one transaction.
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import DatabaseError, DuplicateNameError, ValidationError
from ..models import Folder
from ..repositories import DocumentRepository, FolderRepository, UserRepository, is_unique_violation
from ..schemas.folder import FolderCreate, FolderUpdate
from .pagination import Page, offset_for, validate_page_params

logger = logging.getLogger(__name__)


class FolderService:
    """All folder operations behind a simple interface.

    Public methods:
        create_folder      -- optionally files existing unfiled documents
        get_folder         -- lookup by id (raises FolderNotFoundError)
        list_folders       -- every folder, paginated
        list_user_folders  -- one user's folders, paginated
        check_names
        rename_folder
        delete_folder      -- detach documents, then delete
        delete_folders     -- bulk detach, then bulk delete
    """

    def __init__(self, db: Session):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.doc_repo = DocumentRepository(db)
        self.user_repo = UserRepository(db)

    def create_folder(self, data: FolderCreate) -> Folder:
        """Create a folder and move the listed unfiled documents into it.

        Documents that belong to another user or are already filed are
        left where they are.

        Raises:
            UserNotFoundError: The owner does not exist.
            DuplicateNameError: The user already has a folder with this name.
        """
        self.user_repo.get_by_id(data.folders_user_id)

        try:
            with transaction(self.db):
                folder = self.folder_repo.create(data.name, data.folders_user_id)
                filed = self.doc_repo.assign_to_folder(
                    data.document_ids,
                    folder.id,
                    owner_id=data.folders_user_id,
                    only_unfiled=True,
                )
        except IntegrityError as e:
            self._raise_integrity(e, data.name)

        logger.info(
            "Folder created",
            extra={"folder_id": folder.id, "user_id": data.folders_user_id, "documents_filed": filed},
        )
        return folder

    def get_folder(self, folder_id: int) -> Folder:
        return self.folder_repo.get_by_id(folder_id)

    def list_folders(self, page: int = 1, limit: int = 10) -> Page[Folder]:
        validate_page_params(page, limit)
        return Page(
            data=self.folder_repo.get_all(skip=offset_for(page, limit), limit=limit),
            total=self.folder_repo.count(),
            page=page,
            limit=limit,
        )

    def list_user_folders(self, user_id: int, page: int = 1, limit: int = 10) -> Page[Folder]:
        validate_page_params(page, limit)
        return Page(
            data=self.folder_repo.find_by_owner(user_id, skip=offset_for(page, limit), limit=limit),
            total=self.folder_repo.count_by_owner(user_id),
            page=page,
            limit=limit,
        )

    def check_names(self, user_id: int, names: List[str]) -> List[str]:
        cleaned = [n.strip() for n in names if n and n.strip()]
        return self.folder_repo.existing_names(user_id, cleaned)

    def rename_folder(self, folder_id: int, data: FolderUpdate) -> Folder:
        folder = self.folder_repo.get_by_id(folder_id)
        try:
            with transaction(self.db):
                folder = self.folder_repo.rename(folder, data.name)
        except IntegrityError as e:
            self._raise_integrity(e, data.name)
        return folder

    def delete_folder(self, folder_id: int) -> int:
        """Unfile the folder's documents, then delete the folder.

        Returns the number of documents that were detached.

        Raises:
            FolderNotFoundError: The folder does not exist.
        """
        self.folder_repo.get_by_id(folder_id)
        with transaction(self.db):
            detached = self.folder_repo.detach_documents([folder_id])
            self.folder_repo.delete_many([folder_id])

        logger.info("Folder deleted", extra={"folder_id": folder_id, "documents_detached": detached})
        return detached

    def delete_folders(self, folder_ids: List[int]) -> int:
        """Bulk variant of delete_folder. Returns the number of folders deleted."""
        if not folder_ids:
            raise ValidationError("Invalid IDs array provided", field="ids")
        with transaction(self.db):
            detached = self.folder_repo.detach_documents(folder_ids)
            deleted = self.folder_repo.delete_many(folder_ids)

        logger.info(
            "Folders bulk-deleted",
            extra={"requested": len(folder_ids), "deleted": deleted, "documents_detached": detached},
        )
        return deleted

    @staticmethod
    def _raise_integrity(error: IntegrityError, name: str) -> None:
        if is_unique_violation(error):
            raise DuplicateNameError("folder", name) from error
        raise DatabaseError("Failed to save folder", original_error=error) from error
