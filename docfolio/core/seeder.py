"""Seed a demo user with documents and folders on first startup.

Idempotent: does nothing once any user exists.
"""

import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@docfolio.local"
DEMO_NAME = "Demo User"

# Documents at the top level of the demo account.
_UNFILED_DOCUMENTS = [
    ("Monthly Budget.xlsx", "312 KB"),
    ("Brand Guidelines.pdf", "1024 KB"),
    ("Privacy Policy.docx", "88 KB"),
    ("Q4 Sales Report.pdf", "540 KB"),
    ("Historical Data.xlsx", "230 KB"),
]

# Folder name -> documents filed into it. Empty folders are listed too.
_FOLDERS = {
    "Project Documents": [
        ("Project Proposal.pdf", "410 KB"),
        ("Project Timeline.xlsx", "96 KB"),
        ("Requirements Document.docx", "152 KB"),
    ],
    "Client Contracts": [
        ("Service Agreement.pdf", "205 KB"),
        ("NDA Template.docx", "64 KB"),
    ],
    "Meeting Notes": [
        ("Weekly Standup Notes.docx", "41 KB"),
        ("Action Items.xlsx", "27 KB"),
    ],
    "Financial Records": [],
    "Archives": [],
}


def seed_demo_data(db: Session) -> int:
    """Create the demo account if the database has no users.

    Args:
        db: An open SQLAlchemy session.

    Returns:
        Number of documents seeded (0 if skipped).
    """
    from ..models import User
    from ..schemas.document import DocumentCreate
    from ..schemas.folder import FolderCreate
    from ..schemas.user import UserCreate
    from ..services import DocumentService, FolderService, UserService

    existing = db.query(User).count()
    if existing > 0:
        logger.debug("Database has %d users, skipping seed", existing)
        return 0

    user = UserService(db).ensure_user(UserCreate(email=DEMO_EMAIL, name=DEMO_NAME))
    documents = DocumentService(db)
    folders = FolderService(db)
    seeded = 0

    for name, size in _UNFILED_DOCUMENTS:
        documents.create_document(
            DocumentCreate(name=name, file_size=size, document_user_id=user.id)
        )
        seeded += 1

    for folder_name, contents in _FOLDERS.items():
        ids = []
        for name, size in contents:
            doc = documents.create_document(
                DocumentCreate(name=name, file_size=size, document_user_id=user.id)
            )
            ids.append(doc.id)
            seeded += 1
        folders.create_folder(
            FolderCreate(name=folder_name, folders_user_id=user.id, document_ids=ids)
        )

    logger.info(
        "Seeded demo account with %d documents and %d folders", seeded, len(_FOLDERS)
    )
    return seeded
