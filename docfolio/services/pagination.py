"""Page arithmetic shared by the single-collection listings."""

import math
from dataclasses import dataclass
from typing import Generic, List, TypeVar

from ..exceptions import ValidationError

T = TypeVar("T")


def validate_page_params(page: int, limit: int) -> None:
    """Reject page/limit values below 1."""
    if page < 1:
        raise ValidationError("Page must be greater than or equal to 1", field="page")
    if limit < 1:
        raise ValidationError("Limit must be greater than or equal to 1", field="limit")


def offset_for(page: int, limit: int) -> int:
    """Index of the first row of *page*."""
    return (page - 1) * limit


@dataclass
class Page(Generic[T]):
    """One page of a single collection."""
    data: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)
