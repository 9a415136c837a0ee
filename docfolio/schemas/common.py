"""Shared response envelopes.

Every successful response carries ``success`` and ``message`` next to its
payload; errors use the same two keys (see ``DocfolioException.to_dict``).
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope around a single payload."""
    success: bool = True
    message: str
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope around one page of a single collection.

    ``totalPages`` is ``ceil(total / limit)`` and may be 0 for an empty
    collection; only the combined listing normalizes it to 1.
    """
    model_config = {"populate_by_name": True}

    success: bool = True
    message: str
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int = Field(alias="totalPages")


class IdsRequest(BaseModel):
    """Body of the bulk-delete endpoints: ``{"ids": [1, 2, 3]}``."""
    ids: List[int] = Field(..., min_length=1)


class NamesRequest(BaseModel):
    """Body of the duplicate-name check endpoints."""
    names: List[str] = Field(..., min_length=1)


class NameCheckResult(BaseModel):
    model_config = {"populate_by_name": True}

    existing_names: List[str] = Field(alias="existingNames")
    total_checked: int = Field(alias="totalChecked")
    duplicates_found: int = Field(alias="duplicatesFound")


class DeletedCount(BaseModel):
    model_config = {"populate_by_name": True}

    deleted_count: int = Field(alias="deletedCount")


class UpdatedCount(BaseModel):
    model_config = {"populate_by_name": True}

    updated_count: int = Field(alias="updatedCount")
