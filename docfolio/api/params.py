"""Shared query-parameter handling for paginated endpoints."""

from typing import Optional

from fastapi import Query

from ..core.config import settings
from ..exceptions import ValidationError


class PageParams:
    """``?page=&limit=`` with defaults from settings.

    Values below 1 are rejected by the service layer; values above
    ``max_page_size`` are rejected here.
    """

    def __init__(
        self,
        page: int = Query(1, description="1-based page number"),
        limit: Optional[int] = Query(None, description="Rows per page"),
    ):
        if limit is None:
            limit = settings.default_page_size
        if limit > settings.max_page_size:
            raise ValidationError(
                f"Limit must be at most {settings.max_page_size}", field="limit"
            )
        self.page = page
        self.limit = limit
