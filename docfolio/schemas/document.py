"""Document schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .user import UserResponse


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be empty")
    return v


class DocumentCreate(BaseModel):
    """Schema for creating a document from uploaded file metadata."""
    name: str
    file_size: str
    document_user_id: int = Field(..., ge=1)
    folder_document_id: Optional[int] = Field(None, ge=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator('file_size')
    @classmethod
    def validate_file_size(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("File size cannot be empty")
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Invoice Template.pdf",
                    "file_size": "120 KB",
                    "document_user_id": 1,
                    "folder_document_id": None,
                }
            ]
        }
    }


class DocumentUpdate(BaseModel):
    """Schema for updating a document.

    Omitted fields are left untouched; ``folder_document_id: null``
    explicitly unfiles the document.
    """
    name: Optional[str] = None
    file_size: Optional[str] = None
    folder_document_id: Optional[int] = Field(None, ge=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v) if v is not None else v


class AssignFolderRequest(BaseModel):
    """Move documents into a folder, or unfile them with ``folderId: null``."""
    model_config = {"populate_by_name": True}

    document_ids: List[int] = Field(..., alias="documentIds", min_length=1)
    folder_id: Optional[int] = Field(None, alias="folderId", ge=1)


class FolderSummary(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class DocumentResponse(BaseModel):
    """Schema for document response."""
    id: int
    name: str
    file_size: str
    document_user_id: int
    folder_document_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    type: Literal["document"] = "document"

    model_config = {"from_attributes": True}


class DocumentDetailResponse(DocumentResponse):
    """Document with its owner and folder expanded."""
    created_by: Optional[UserResponse] = None
    belong_to_folder: Optional[FolderSummary] = None
