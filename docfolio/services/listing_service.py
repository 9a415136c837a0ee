"""Combined listing of a user's folders and documents as one paginated feed.

Documents and folders live in separate tables with separate id sequences,
so they cannot be ordered or paginated together by the database. The feed
is assembled here instead:

    1. count both collections (with the optional name filter)
    2. fetch the first ``page * limit`` rows of each, newest first
    3. merge the two prefixes: folders first, then newest first
    4. slice out the requested window and split it back by kind

An offset in the merged feed does not map to a fixed offset in either
table, so each table is read from its start. Cost is linear in
``page * limit``.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from ..models import Document, Folder
from ..repositories import DocumentRepository, FolderRepository
from .pagination import offset_for, validate_page_params

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Rows without a timestamp sort as the oldest.
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ItemKind(str, Enum):
    """Which collection a feed row came from."""
    FOLDER = "folder"
    DOCUMENT = "document"


@dataclass(frozen=True)
class ListingRow:
    """A feed row, tagged with its kind when it is read from the database."""

    kind: ItemKind
    entity: Union[Document, Folder]

    @classmethod
    def of_document(cls, document: Document) -> "ListingRow":
        return cls(ItemKind.DOCUMENT, document)

    @classmethod
    def of_folder(cls, folder: Folder) -> "ListingRow":
        return cls(ItemKind.FOLDER, folder)

    @property
    def id(self) -> int:
        return self.entity.id

    @property
    def created_at(self) -> datetime:
        value = self.entity.created_at
        if value is None:
            return _EPOCH
        # SQLite hands back naive datetimes; treat them as UTC.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

    def sort_key(self) -> tuple:
        """Folders first, then newest first, then highest id first."""
        return (
            0 if self.kind is ItemKind.FOLDER else 1,
            -self.created_at.timestamp(),
            -self.id,
        )


def merge_rows(rows: List[ListingRow]) -> List[ListingRow]:
    """Order *rows* by the feed ordering."""
    return sorted(rows, key=ListingRow.sort_key)


def count_feed_pages(total: int, limit: int) -> int:
    """Number of pages in the feed; an empty feed still has one page."""
    return math.ceil(total / limit) if total > 0 else 1


def normalize_search(search: Optional[str]) -> Optional[str]:
    """Return the trimmed search term, or None when it is missing or blank."""
    if search is None:
        return None
    term = search.strip()
    return term or None


@dataclass
class CombinedListing:
    """One window of the merged feed, split back into its two kinds."""

    documents: List[Document]
    folders: List[Folder]
    documents_total: int
    folders_total: int
    page: int
    limit: int
    rows: List[ListingRow] = field(default_factory=list, repr=False)

    @property
    def total(self) -> int:
        return self.documents_total + self.folders_total

    @property
    def total_pages(self) -> int:
        return count_feed_pages(self.total, self.limit)


class ListingService:
    """Assembles the combined folders-and-documents feed for one user."""

    def __init__(self, db: Session):
        self.db = db
        self.doc_repo = DocumentRepository(db)
        self.folder_repo = FolderRepository(db)

    def list_combined(
        self,
        user_id: int,
        search: Optional[str] = None,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> CombinedListing:
        """Return page *page* of the user's feed, optionally filtered by name.

        A blank *search* is the same as no search. A page past the end
        yields an empty window rather than an error.

        Raises:
            ValidationError: If page or limit is below 1.
        """
        validate_page_params(page, limit)
        term = normalize_search(search)

        documents_total = self.doc_repo.count_by_owner(user_id, term)
        folders_total = self.folder_repo.count_by_owner(user_id, term)

        # Every row up to the end of the requested page, from the start of
        # the feed. Either collection may supply all of them.
        items_needed = page * limit
        folders = (
            self.folder_repo.find_by_owner(user_id, term, limit=min(items_needed, folders_total))
            if folders_total
            else []
        )
        documents = (
            self.doc_repo.find_by_owner(user_id, term, limit=min(items_needed, documents_total))
            if documents_total
            else []
        )

        merged = merge_rows(
            [ListingRow.of_folder(f) for f in folders]
            + [ListingRow.of_document(d) for d in documents]
        )
        start = offset_for(page, limit)
        window = merged[start:start + limit]

        listing = CombinedListing(
            documents=[row.entity for row in window if row.kind is ItemKind.DOCUMENT],
            folders=[row.entity for row in window if row.kind is ItemKind.FOLDER],
            documents_total=documents_total,
            folders_total=folders_total,
            page=page,
            limit=limit,
            rows=window,
        )

        logger.debug(
            "Assembled combined listing",
            extra={
                "user_id": user_id,
                "search": term,
                "page": page,
                "limit": limit,
                "documents_total": documents_total,
                "folders_total": folders_total,
                "window_size": len(window),
            },
        )
        return listing
