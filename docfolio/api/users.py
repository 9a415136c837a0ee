"""User API: user lookups and the combined documents-and-folders feed.

Both feed endpoints go through ListingService.list_combined; the search
endpoint with a blank term is the plain listing.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import parse_id
from ..schemas import (
    ApiResponse,
    CombinedListingResponse,
    DocumentResponse,
    FolderResponse,
    PaginatedResponse,
    UserResponse,
)
from ..services import ListingService, UserService
from ..services.listing_service import CombinedListing
from .params import PageParams

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


def _listing_response(listing: CombinedListing, message: str) -> CombinedListingResponse:
    return CombinedListingResponse(
        message=message,
        documents=[DocumentResponse.model_validate(d) for d in listing.documents],
        folders=[FolderResponse.model_validate(f) for f in listing.folders],
        documents_total=listing.documents_total,
        folders_total=listing.folders_total,
        total=listing.total,
        page=listing.page,
        limit=listing.limit,
        total_pages=listing.total_pages,
    )


@router.get("", response_model=PaginatedResponse[UserResponse])
def list_users(params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = UserService(db).list_users(params.page, params.limit)
    return PaginatedResponse[UserResponse](
        message="Users retrieved successfully",
        data=[UserResponse.model_validate(u) for u in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = UserService(db).get_user(parse_id(user_id, "user ID"))
    return ApiResponse[UserResponse](
        message="User retrieved successfully",
        data=UserResponse.model_validate(user),
    )


@router.get("/{user_id}/documents-folders", response_model=CombinedListingResponse)
def get_documents_and_folders(
    user_id: str,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    """One page of the user's feed: folders first, newest first."""
    uid = parse_id(user_id, "user ID")
    listing = ListingService(db).list_combined(uid, page=params.page, limit=params.limit)
    return _listing_response(listing, "Documents and folders retrieved successfully")


@router.get("/{user_id}/search", response_model=CombinedListingResponse)
def search_documents_and_folders(
    user_id: str,
    search: Optional[str] = Query(None, description="Case-insensitive name substring"),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
):
    """Feed filtered by name. A missing or blank term returns the plain feed."""
    uid = parse_id(user_id, "user ID")
    listing = ListingService(db).list_combined(
        uid, search=search, page=params.page, limit=params.limit
    )
    return _listing_response(listing, "Search results retrieved successfully")
