"""Business logic services."""

from .document_service import DocumentService
from .folder_service import FolderService
from .listing_service import ListingService
from .user_service import UserService

__all__ = ["DocumentService", "FolderService", "ListingService", "UserService"]
