"""Document service: lifecycle of file-metadata records.

Owns creation (with duplicate-name detection), lookups, paginated listings,
folder assignment and deletion. Every public mutating method commits or
rolls back as a unit.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import transaction
from ..exceptions import DatabaseError, DuplicateNameError, ValidationError
from ..models import Document
from ..repositories import DocumentRepository, FolderRepository, UserRepository, is_unique_violation
from ..schemas.document import DocumentCreate, DocumentUpdate
from .pagination import Page, offset_for, validate_page_params

logger = logging.getLogger(__name__)


class DocumentService:
    """Document operations behind a narrow interface.

    Public methods:
        create_document     -- insert; duplicate names raise DuplicateNameError
        get_document        -- lookup by id (raises DocumentNotFoundError)
        list_documents      -- every document, paginated
        list_user_documents -- one user's documents, paginated
        list_folder_documents
        get_unfiled_documents
        check_names         -- which names the user already has
        update_document
        assign_to_folder    -- bulk move into (or out of) a folder
        delete_document
        delete_documents    -- bulk delete
    """

    def __init__(self, db: Session):
        self.db = db
        self.doc_repo = DocumentRepository(db)
        self.folder_repo = FolderRepository(db)
        self.user_repo = UserRepository(db)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_document(self, data: DocumentCreate) -> Document:
        """Create a document for an existing user.

        Raises:
            UserNotFoundError: The owner does not exist.
            FolderNotFoundError: The target folder does not exist.
            ValidationError: The folder belongs to another user.
            DuplicateNameError: The user already has a document with this name.
        """
        self.user_repo.get_by_id(data.document_user_id)
        if data.folder_document_id is not None:
            self._require_owned_folder(data.folder_document_id, data.document_user_id)

        try:
            with transaction(self.db):
                document = self.doc_repo.create(data)
        except IntegrityError as e:
            self._raise_integrity(e, data.name)

        logger.info(
            "Document created",
            extra={"document_id": document.id, "user_id": data.document_user_id},
        )
        return document

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_document(self, document_id: int) -> Document:
        return self.doc_repo.get_by_id(document_id)

    def list_documents(self, page: int = 1, limit: int = 10) -> Page[Document]:
        validate_page_params(page, limit)
        return Page(
            data=self.doc_repo.get_all(skip=offset_for(page, limit), limit=limit),
            total=self.doc_repo.count(),
            page=page,
            limit=limit,
        )

    def list_user_documents(self, user_id: int, page: int = 1, limit: int = 10) -> Page[Document]:
        validate_page_params(page, limit)
        return Page(
            data=self.doc_repo.find_by_owner(user_id, skip=offset_for(page, limit), limit=limit),
            total=self.doc_repo.count_by_owner(user_id),
            page=page,
            limit=limit,
        )

    def list_folder_documents(self, folder_id: int, page: int = 1, limit: int = 10) -> Page[Document]:
        validate_page_params(page, limit)
        return Page(
            data=self.doc_repo.find_by_folder(folder_id, skip=offset_for(page, limit), limit=limit),
            total=self.doc_repo.count_by_folder(folder_id),
            page=page,
            limit=limit,
        )

    def get_unfiled_documents(self, user_id: int) -> List[Document]:
        return self.doc_repo.get_unfiled(user_id)

    def check_names(self, user_id: int, names: List[str]) -> List[str]:
        """Return the subset of *names* that already exist for *user_id*."""
        cleaned = [n.strip() for n in names if n and n.strip()]
        return self.doc_repo.existing_names(user_id, cleaned)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_document(self, document_id: int, data: DocumentUpdate) -> Document:
        """Apply the fields present in *data*.

        Raises:
            DocumentNotFoundError, FolderNotFoundError, ValidationError,
            DuplicateNameError
        """
        document = self.doc_repo.get_by_id(document_id)
        changes = data.model_dump(exclude_unset=True)

        # Explicit nulls for required columns are ignored, not stored.
        for column in ("name", "file_size"):
            if column in changes and changes[column] is None:
                changes.pop(column)

        folder_id = changes.get("folder_document_id")
        if folder_id is not None:
            self._require_owned_folder(folder_id, document.document_user_id)

        try:
            with transaction(self.db):
                document = self.doc_repo.update(document, changes)
        except IntegrityError as e:
            self._raise_integrity(e, changes.get("name", document.name))
        return document

    def assign_to_folder(self, document_ids: List[int], folder_id: Optional[int]) -> int:
        """Move documents into *folder_id*, or unfile them when it is None.

        Only documents owned by the folder's owner are moved.
        Returns the number of documents updated.
        """
        owner_id = None
        if folder_id is not None:
            owner_id = self.folder_repo.get_by_id(folder_id).folders_user_id

        with transaction(self.db):
            updated = self.doc_repo.assign_to_folder(document_ids, folder_id, owner_id=owner_id)

        logger.info(
            "Documents assigned to folder",
            extra={"folder_id": folder_id, "requested": len(document_ids), "updated": updated},
        )
        return updated

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_document(self, document_id: int) -> None:
        document = self.doc_repo.get_by_id(document_id)
        with transaction(self.db):
            self.doc_repo.delete(document)
        logger.info("Document deleted", extra={"document_id": document_id})

    def delete_documents(self, document_ids: List[int]) -> int:
        """Delete every listed document that exists. Returns the count removed."""
        if not document_ids:
            raise ValidationError("Invalid IDs array provided", field="ids")
        with transaction(self.db):
            deleted = self.doc_repo.delete_many(document_ids)
        logger.info(
            "Documents bulk-deleted",
            extra={"requested": len(document_ids), "deleted": deleted},
        )
        return deleted

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require_owned_folder(self, folder_id: int, user_id: int) -> None:
        folder = self.folder_repo.get_by_id(folder_id)
        if folder.folders_user_id != user_id:
            raise ValidationError(
                "Folder belongs to a different user", field="folder_document_id"
            )

    @staticmethod
    def _raise_integrity(error: IntegrityError, name: str) -> None:
        if is_unique_violation(error):
            raise DuplicateNameError("document", name) from error
        raise DatabaseError("Failed to save document", original_error=error) from error
