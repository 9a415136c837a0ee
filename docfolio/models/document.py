"""Document model.

A document is file metadata only: the binary content is never stored.
"""

from sqlalchemy import Column, Index, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Document(Base):
    """Uploaded file metadata, optionally filed into one folder."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("document_user_id", "name", name="uq_documents_user_name"),
        Index("ix_documents_user_created", "document_user_id", "created_at"),
        Index("ix_documents_folder_id", "folder_document_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    # Human-readable size, e.g. "100 KB"
    file_size = Column(String(50), nullable=False)

    document_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # NULL = unfiled
    folder_document_id = Column(
        Integer, ForeignKey("folders.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    created_by = relationship("User", back_populates="documents")
    belong_to_folder = relationship("Folder", back_populates="documents")
