"""User schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class UserCreate(BaseModel):
    email: str
    name: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if '@' not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class UserResponse(BaseModel):
    """Schema for user response."""
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
