"""Data access repositories."""

from .base import BaseRepository, is_unique_violation
from .user_repository import UserRepository
from .document_repository import DocumentRepository
from .folder_repository import FolderRepository

__all__ = [
    "BaseRepository",
    "is_unique_violation",
    "UserRepository",
    "DocumentRepository",
    "FolderRepository",
]
