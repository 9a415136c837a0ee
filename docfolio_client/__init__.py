"""Async consumer of the Docfolio REST API."""

from .api_client import ApiError, DocfolioClient
from .debounce import SearchDebouncer
from .listing import ItemKind, ListingConsumer, ListingItem
from .upload import UploadBatch, format_file_size, validate_file

__all__ = [
    "ApiError",
    "DocfolioClient",
    "ItemKind",
    "ListingConsumer",
    "ListingItem",
    "SearchDebouncer",
    "UploadBatch",
    "format_file_size",
    "validate_file",
]
