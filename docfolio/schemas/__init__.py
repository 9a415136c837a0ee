"""Pydantic schemas for API validation."""

from .common import (
    ApiResponse,
    PaginatedResponse,
    IdsRequest,
    NamesRequest,
    NameCheckResult,
    DeletedCount,
    UpdatedCount,
)
from .user import UserCreate, UserResponse
from .document import (
    DocumentCreate,
    DocumentUpdate,
    AssignFolderRequest,
    DocumentResponse,
    DocumentDetailResponse,
)
from .folder import FolderCreate, FolderUpdate, FolderResponse, FolderDetailResponse
from .listing import CombinedListingResponse

__all__ = [
    "ApiResponse",
    "PaginatedResponse",
    "IdsRequest",
    "NamesRequest",
    "NameCheckResult",
    "DeletedCount",
    "UpdatedCount",
    "UserCreate",
    "UserResponse",
    "DocumentCreate",
    "DocumentUpdate",
    "AssignFolderRequest",
    "DocumentResponse",
    "DocumentDetailResponse",
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "FolderDetailResponse",
    "CombinedListingResponse",
]
