"""Folder schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .document import DocumentResponse
from .user import UserResponse


class FolderCreate(BaseModel):
    """Schema for creating a folder.

    ``document_ids`` optionally moves existing unfiled documents of the
    same user into the new folder.
    """
    name: str
    folders_user_id: int = Field(..., ge=1)
    document_ids: List[int] = []

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class FolderUpdate(BaseModel):
    name: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class FolderResponse(BaseModel):
    """Schema for folder response."""
    id: int
    name: str
    folders_user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    type: Literal["folder"] = "folder"

    model_config = {"from_attributes": True}


class FolderDetailResponse(FolderResponse):
    """Folder with its owner and contained documents expanded."""
    created_by: Optional[UserResponse] = None
    documents: List[DocumentResponse] = []
