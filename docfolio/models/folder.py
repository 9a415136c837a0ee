"""Folder model.

Folders are flat: a folder groups documents but never other folders.
"""

from sqlalchemy import Column, Index, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Folder(Base):
    """Named grouping of a user's documents."""

    __tablename__ = "folders"
    __table_args__ = (
        UniqueConstraint("folders_user_id", "name", name="uq_folders_user_name"),
        Index("ix_folders_user_created", "folders_user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    folders_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    created_by = relationship("User", back_populates="folders")
    # Documents are detached explicitly before deletion, never cascaded.
    documents = relationship(
        "Document",
        back_populates="belong_to_folder",
        order_by="Document.created_at.desc()",
        passive_deletes=True,
    )
