"""Folder API: CRUD, duplicate-name check and detach-then-delete.

Single router for all folder operations. Delegates to FolderService.
"""

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import parse_id
from ..schemas import (
    ApiResponse,
    DeletedCount,
    FolderCreate,
    FolderDetailResponse,
    FolderResponse,
    FolderUpdate,
    IdsRequest,
    NameCheckResult,
    NamesRequest,
    PaginatedResponse,
)
from ..services import FolderService
from ..services.pagination import Page
from .params import PageParams

router = APIRouter(prefix="/api/folders", tags=["folders"])


def _page_response(result: Page, message: str) -> PaginatedResponse[FolderResponse]:
    return PaginatedResponse[FolderResponse](
        message=message,
        data=[FolderResponse.model_validate(f) for f in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


# -- Collection -----------------------------------------------------------

@router.post("", response_model=ApiResponse[FolderDetailResponse], status_code=201)
def create_folder(data: FolderCreate, db: Session = Depends(get_db)):
    """Create a folder, optionally filing unfiled documents into it."""
    folder = FolderService(db).create_folder(data)
    return ApiResponse[FolderDetailResponse](
        message="Folder created successfully",
        data=FolderDetailResponse.model_validate(folder),
    )


@router.get("", response_model=PaginatedResponse[FolderResponse])
def list_folders(params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = FolderService(db).list_folders(params.page, params.limit)
    return _page_response(result, "Folders retrieved successfully")


@router.delete("", response_model=ApiResponse[DeletedCount])
def delete_many_folders(body: IdsRequest = Body(...), db: Session = Depends(get_db)):
    """Delete several folders; their documents become unfiled."""
    deleted = FolderService(db).delete_folders(body.ids)
    return ApiResponse[DeletedCount](
        message=f"{deleted} folder(s) deleted successfully",
        data=DeletedCount(deleted_count=deleted),
    )


# -- Per user -------------------------------------------------------------

@router.get("/user/{user_id}", response_model=PaginatedResponse[FolderResponse])
def list_user_folders(user_id: str, params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = FolderService(db).list_user_folders(
        parse_id(user_id, "user ID"), params.page, params.limit
    )
    return _page_response(result, "Folders retrieved successfully")


@router.post("/user/{user_id}/check-names", response_model=ApiResponse[NameCheckResult])
def check_folder_names(user_id: str, body: NamesRequest, db: Session = Depends(get_db)):
    existing = FolderService(db).check_names(parse_id(user_id, "user ID"), body.names)
    return ApiResponse[NameCheckResult](
        message="Folder names checked successfully",
        data=NameCheckResult(
            existing_names=existing,
            total_checked=len(body.names),
            duplicates_found=len(existing),
        ),
    )


# -- Single folder --------------------------------------------------------

@router.get("/{folder_id}", response_model=ApiResponse[FolderDetailResponse])
def get_folder(folder_id: str, db: Session = Depends(get_db)):
    """Folder with its documents, newest first."""
    folder = FolderService(db).get_folder(parse_id(folder_id, "folder ID"))
    return ApiResponse[FolderDetailResponse](
        message="Folder retrieved successfully",
        data=FolderDetailResponse.model_validate(folder),
    )


@router.put("/{folder_id}", response_model=ApiResponse[FolderDetailResponse])
def rename_folder(folder_id: str, data: FolderUpdate, db: Session = Depends(get_db)):
    folder = FolderService(db).rename_folder(parse_id(folder_id, "folder ID"), data)
    return ApiResponse[FolderDetailResponse](
        message="Folder updated successfully",
        data=FolderDetailResponse.model_validate(folder),
    )


@router.delete("/{folder_id}", response_model=ApiResponse[None])
def delete_folder(folder_id: str, db: Session = Depends(get_db)):
    """Delete a folder. Its documents are kept and become unfiled."""
    detached = FolderService(db).delete_folder(parse_id(folder_id, "folder ID"))
    return ApiResponse[None](
        message=f"Folder deleted successfully ({detached} document(s) unfiled)"
    )
