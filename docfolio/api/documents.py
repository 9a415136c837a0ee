"""Document API endpoints.

Endpoints are thin: DocumentService owns validation against the store,
duplicate detection and transactions. Identifiers arrive as path strings
and are parsed with parse_id so that a malformed id is a 400 raised before
any query runs.
"""

from typing import List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import parse_id
from ..schemas import (
    ApiResponse,
    AssignFolderRequest,
    DeletedCount,
    DocumentCreate,
    DocumentDetailResponse,
    DocumentResponse,
    DocumentUpdate,
    IdsRequest,
    NameCheckResult,
    NamesRequest,
    PaginatedResponse,
    UpdatedCount,
)
from ..services import DocumentService
from ..services.pagination import Page
from .params import PageParams

router = APIRouter(prefix="/api/documents", tags=["documents"])


def _page_response(result: Page, message: str) -> PaginatedResponse[DocumentResponse]:
    return PaginatedResponse[DocumentResponse](
        message=message,
        data=[DocumentResponse.model_validate(d) for d in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.post("", response_model=ApiResponse[DocumentDetailResponse], status_code=201)
def create_document(document: DocumentCreate, db: Session = Depends(get_db)):
    """Create a document record from uploaded file metadata."""
    doc = DocumentService(db).create_document(document)
    return ApiResponse[DocumentDetailResponse](
        message="Document created successfully",
        data=DocumentDetailResponse.model_validate(doc),
    )


@router.get("", response_model=PaginatedResponse[DocumentResponse])
def list_documents(params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = DocumentService(db).list_documents(params.page, params.limit)
    return _page_response(result, "Documents retrieved successfully")


@router.delete("", response_model=ApiResponse[DeletedCount])
def delete_many_documents(body: IdsRequest = Body(...), db: Session = Depends(get_db)):
    """Delete several documents: ``{"ids": [1, 2, 3]}``."""
    deleted = DocumentService(db).delete_documents(body.ids)
    return ApiResponse[DeletedCount](
        message=f"{deleted} document(s) deleted successfully",
        data=DeletedCount(deleted_count=deleted),
    )


# --- Fixed-path endpoints (must be before /{document_id} to avoid route shadowing) ---


@router.get("/user/{user_id}", response_model=PaginatedResponse[DocumentResponse])
def list_user_documents(user_id: str, params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = DocumentService(db).list_user_documents(
        parse_id(user_id, "user ID"), params.page, params.limit
    )
    return _page_response(result, "Documents retrieved successfully")


@router.get("/user/{user_id}/without-folder", response_model=ApiResponse[List[DocumentResponse]])
def list_unfiled_documents(user_id: str, db: Session = Depends(get_db)):
    """Documents not yet in any folder (candidates for a new folder)."""
    docs = DocumentService(db).get_unfiled_documents(parse_id(user_id, "user ID"))
    return ApiResponse[List[DocumentResponse]](
        message="Documents retrieved successfully",
        data=[DocumentResponse.model_validate(d) for d in docs],
    )


@router.post("/user/{user_id}/check-names", response_model=ApiResponse[NameCheckResult])
def check_document_names(user_id: str, body: NamesRequest, db: Session = Depends(get_db)):
    """Report which of the given names the user already has."""
    existing = DocumentService(db).check_names(parse_id(user_id, "user ID"), body.names)
    return ApiResponse[NameCheckResult](
        message="Document names checked successfully",
        data=NameCheckResult(
            existing_names=existing,
            total_checked=len(body.names),
            duplicates_found=len(existing),
        ),
    )


@router.get("/folder/{folder_id}", response_model=PaginatedResponse[DocumentResponse])
def list_folder_documents(folder_id: str, params: PageParams = Depends(), db: Session = Depends(get_db)):
    result = DocumentService(db).list_folder_documents(
        parse_id(folder_id, "folder ID"), params.page, params.limit
    )
    return _page_response(result, "Documents retrieved successfully")


@router.put("/assign-folder", response_model=ApiResponse[UpdatedCount])
def assign_documents_to_folder(body: AssignFolderRequest, db: Session = Depends(get_db)):
    """Move documents into a folder, or unfile them with ``folderId: null``."""
    updated = DocumentService(db).assign_to_folder(body.document_ids, body.folder_id)
    return ApiResponse[UpdatedCount](
        message=f"{updated} document(s) assigned to folder successfully",
        data=UpdatedCount(updated_count=updated),
    )


# --- Single-document endpoints ---


@router.get("/{document_id}", response_model=ApiResponse[DocumentDetailResponse])
def get_document(document_id: str, db: Session = Depends(get_db)):
    doc = DocumentService(db).get_document(parse_id(document_id, "document ID"))
    return ApiResponse[DocumentDetailResponse](
        message="Document retrieved successfully",
        data=DocumentDetailResponse.model_validate(doc),
    )


@router.put("/{document_id}", response_model=ApiResponse[DocumentDetailResponse])
def update_document(document_id: str, data: DocumentUpdate, db: Session = Depends(get_db)):
    doc = DocumentService(db).update_document(parse_id(document_id, "document ID"), data)
    return ApiResponse[DocumentDetailResponse](
        message="Document updated successfully",
        data=DocumentDetailResponse.model_validate(doc),
    )


@router.delete("/{document_id}", response_model=ApiResponse[None])
def delete_document(document_id: str, db: Session = Depends(get_db)):
    DocumentService(db).delete_document(parse_id(document_id, "document ID"))
    return ApiResponse[None](message="Document deleted successfully")
