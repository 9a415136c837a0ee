"""Client-side state for the combined folders-and-documents listing.

The server returns documents and folders as two lists; the consumer tags
each row with its kind, merges them with the server's ordering, and keeps
page, search and selection state consistent with the reported page count.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from .api_client import ApiError, DocfolioClient
from .debounce import DEFAULT_DELAY, SearchDebouncer

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ItemKind(str, Enum):
    FOLDER = "folder"
    DOCUMENT = "document"


def selection_key(kind: ItemKind, item_id: int) -> str:
    """Composite ``kind-id`` key; ids alone collide across the two tables."""
    return f"{kind.value}-{item_id}"


def parse_selection_key(key: str) -> tuple[ItemKind, int]:
    kind, _, raw_id = key.partition("-")
    return ItemKind(kind), int(raw_id)


def _parse_timestamp(value: Optional[str]) -> datetime:
    if not value:
        return _EPOCH
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class ListingItem:
    """One row of the feed, tagged with its kind when it is decoded."""

    kind: ItemKind
    id: int
    name: str
    created_at: datetime
    data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_payload(cls, kind: ItemKind, payload: dict[str, Any]) -> "ListingItem":
        return cls(
            kind=kind,
            id=payload["id"],
            name=payload.get("name", ""),
            created_at=_parse_timestamp(payload.get("created_at")),
            data=payload,
        )

    @property
    def key(self) -> str:
        return selection_key(self.kind, self.id)

    def sort_key(self) -> tuple:
        return (
            0 if self.kind is ItemKind.FOLDER else 1,
            -self.created_at.timestamp(),
            -self.id,
        )


def merge_items(documents: Iterable[dict], folders: Iterable[dict]) -> list[ListingItem]:
    """Tag both lists and order them folders first, then newest first."""
    items = [ListingItem.from_payload(ItemKind.FOLDER, f) for f in folders]
    items += [ListingItem.from_payload(ItemKind.DOCUMENT, d) for d in documents]
    return sorted(items, key=ListingItem.sort_key)


class ListingConsumer:
    """Page, search and selection state over one user's combined feed.

    Every mutation that changes what should be on screen ends in
    ``refresh()``, which also reconciles the current page with the
    server's ``totalPages``.
    """

    def __init__(
        self,
        client: DocfolioClient,
        user_id: int,
        rows_per_page: int = 10,
        debounce_seconds: float = DEFAULT_DELAY,
    ):
        self.client = client
        self.user_id = user_id
        self.page = 1
        self.rows_per_page = rows_per_page
        self.search_input = ""
        self.search_query = ""
        self.selected: set[str] = set()
        self.total_pages = 1
        self.items: list[ListingItem] = []
        self.error: Optional[str] = None
        self.loading = False
        self._debouncer = SearchDebouncer(delay=debounce_seconds)

    # -- Fetching ---------------------------------------------------------

    async def refresh(self) -> None:
        """Fetch the current page, then fix up the page number if needed."""
        if not await self._fetch():
            return

        if self.total_pages < self.page:
            self.page = self.total_pages or 1
            logger.debug("Page count shrank, clamping to page %d", self.page)
            await self._fetch()
        elif not self.items and self.page > 1:
            logger.debug("Page %d is empty, returning to page 1", self.page)
            self.page = 1
            await self._fetch()

    async def _fetch(self) -> bool:
        self.loading = True
        self.error = None
        term = self.search_query.strip()
        try:
            if term:
                payload = await self.client.search_combined(
                    self.user_id, term, page=self.page, limit=self.rows_per_page,
                )
            else:
                payload = await self.client.list_combined(
                    self.user_id, page=self.page, limit=self.rows_per_page,
                )
        except ApiError as exc:
            self.error = exc.message or "Failed to load documents"
            self.items = []
            self.total_pages = 1
            return False
        finally:
            self.loading = False

        self.items = merge_items(payload.get("documents") or [], payload.get("folders") or [])
        self.total_pages = payload.get("totalPages") or 1
        return True

    # -- Search -----------------------------------------------------------

    def type_search(self, text: str, now: Optional[float] = None) -> None:
        """Record raw input; nothing is fetched until the input settles."""
        self.search_input = text
        self._debouncer.push(text, now=now)

    async def commit_search(self, now: Optional[float] = None) -> bool:
        """Commit the buffered input if it has been still long enough.

        Returns True when a new query was committed (and fetched).
        """
        query = self._debouncer.poll(now)
        if query is None or query == self.search_query:
            return False
        self.search_query = query
        self.page = 1
        await self.refresh()
        return True

    async def settle_search(self) -> bool:
        """Wait out the quiescence window, then commit."""
        while self._debouncer.pending:
            await asyncio.sleep(self._debouncer.remaining())
            if self._debouncer.remaining() == 0:
                return await self.commit_search()
        return False

    # -- Paging -----------------------------------------------------------

    async def set_page(self, page: int) -> None:
        self.page = max(1, page)
        await self.refresh()

    async def set_rows_per_page(self, rows: int) -> None:
        self.rows_per_page = rows
        self.page = 1
        await self.refresh()

    # -- Selection --------------------------------------------------------

    def toggle(self, kind: ItemKind, item_id: int) -> None:
        key = selection_key(kind, item_id)
        if key in self.selected:
            self.selected.discard(key)
        else:
            self.selected.add(key)

    def select_all(self) -> None:
        self.selected = {item.key for item in self.items}

    def clear_selection(self) -> None:
        self.selected = set()

    @property
    def all_selected(self) -> bool:
        return bool(self.items) and all(item.key in self.selected for item in self.items)

    # -- Deletion ---------------------------------------------------------

    async def delete_item(self, kind: ItemKind, item_id: int) -> bool:
        """Delete one row; a folder's documents become unfiled server-side."""
        try:
            if kind is ItemKind.DOCUMENT:
                await self.client.delete_document(item_id)
            else:
                await self.client.delete_folder(item_id)
        except ApiError as exc:
            self.error = exc.message or "Failed to delete item"
            return False

        self.selected.discard(selection_key(kind, item_id))
        await self.refresh()
        return True

    def partition_selection(self) -> tuple[list[int], list[int]]:
        """Split the selected keys into (document ids, folder ids)."""
        document_ids: list[int] = []
        folder_ids: list[int] = []
        for key in sorted(self.selected):
            kind, item_id = parse_selection_key(key)
            if kind is ItemKind.DOCUMENT:
                document_ids.append(item_id)
            else:
                folder_ids.append(item_id)
        return document_ids, folder_ids

    async def delete_selected(self) -> bool:
        """Bulk-delete every selected row with one call per kind."""
        if not self.selected:
            return False

        document_ids, folder_ids = self.partition_selection()
        batches = []
        if document_ids:
            batches.append((ItemKind.DOCUMENT, document_ids, self.client.delete_documents(document_ids)))
        if folder_ids:
            batches.append((ItemKind.FOLDER, folder_ids, self.client.delete_folders(folder_ids)))

        # Both calls run to completion even when one of them fails.
        outcomes = await asyncio.gather(*(call for _, _, call in batches), return_exceptions=True)

        failure: Optional[ApiError] = None
        for (kind, ids, _), outcome in zip(batches, outcomes):
            if isinstance(outcome, ApiError):
                failure = failure or outcome
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            self.selected -= {selection_key(kind, item_id) for item_id in ids}

        logger.info(
            "Deleted selection",
            extra={
                "documents": len(document_ids),
                "folders": len(folder_ids),
                "failed": failure is not None,
            },
        )
        await self.refresh()

        if failure is not None:
            self.error = failure.message or "Failed to delete items"
            return False
        return True
