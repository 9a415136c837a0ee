"""Database models."""

from .user import User
from .document import Document
from .folder import Folder

__all__ = ["User", "Document", "Folder"]
