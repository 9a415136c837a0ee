"""Combined document/folder listing schema (wire contract)."""

from typing import List

from pydantic import BaseModel, Field

from .document import DocumentResponse
from .folder import FolderResponse


class CombinedListingResponse(BaseModel):
    """One page of the merged folders-then-documents feed.

    The window is returned partitioned by kind; clients re-merge it with
    the same ordering (folders first, newest first).
    """
    model_config = {"populate_by_name": True}

    success: bool = True
    message: str
    documents: List[DocumentResponse]
    folders: List[FolderResponse]
    documents_total: int = Field(alias="documentsTotal")
    folders_total: int = Field(alias="foldersTotal")
    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")
