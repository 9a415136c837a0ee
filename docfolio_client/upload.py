"""Client-side upload validation and the sequential upload flow.

Files are checked locally (extension, size, duplicates in the pending
list) before any network call, then checked against the server's
existing names, then created one at a time.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .api_client import ApiError, DocfolioClient

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".docx", ".xlsx", ".pdf")
MAX_FILE_SIZE = 5 * 1024 * 1024

_UNITS = ("Bytes", "KB", "MB")


def _round2(value: float) -> str:
    # Half-up rounding to two places; whole numbers print without decimals.
    rounded = math.floor(value * 100 + 0.5) / 100
    return str(int(rounded)) if rounded % 1 == 0 else f"{rounded:.2f}"


def format_file_size(size: int) -> str:
    """Human-readable size in Bytes, KB or MB, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 Bytes"
    index = 0
    value = float(size)
    while value >= 1024 and index < len(_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{_round2(value)} {_UNITS[index]}"


def upload_size_label(size: int) -> str:
    """Size string stored on the document record: whole kilobytes."""
    return f"{math.floor(size / 1024 + 0.5)} KB"


def file_extension(name: str) -> str:
    dot = name.rfind(".")
    return name[dot:].lower() if dot >= 0 else ""


def validate_file(name: str, size: int) -> Optional[str]:
    """Return an error message for a file that may not be uploaded, else None."""
    extension = file_extension(name)
    if extension not in ALLOWED_EXTENSIONS:
        return (
            f"File type {extension or name} is not allowed. "
            f"Only {', '.join(ALLOWED_EXTENSIONS)} files are supported."
        )
    if size == 0:
        return "File is empty. Please select a file with content."
    if size > MAX_FILE_SIZE:
        return (
            f"File size ({format_file_size(size)}) exceeds the maximum limit "
            f"of {format_file_size(MAX_FILE_SIZE)}."
        )
    return None


class UploadStatus(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class PendingFile:
    name: str
    size: int
    status: UploadStatus = UploadStatus.PENDING
    error: Optional[str] = None

    @property
    def uploadable(self) -> bool:
        return self.status is UploadStatus.PENDING and self.error is None

    def fail(self, message: str) -> None:
        self.status = UploadStatus.ERROR
        self.error = message


@dataclass
class UploadResult:
    success: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class UploadBatch:
    """A list of files a user is about to upload.

    Each file carries its own status and error so problems are reported
    per item rather than failing the whole batch.
    """

    def __init__(self, client: DocfolioClient, user_id: int):
        self.client = client
        self.user_id = user_id
        self.files: List[PendingFile] = []

    def add(self, files: Iterable[Tuple[str, int]]) -> List[PendingFile]:
        """Validate and append ``(name, size)`` pairs. Returns the new entries."""
        added: List[PendingFile] = []
        for name, size in files:
            error = validate_file(name, size)
            if error is None and any(f.name == name for f in self.files):
                error = f'A file with the name "{name}" is already in the upload list.'
            if error is None and any(f.name == name for f in added):
                error = f'Multiple files with the name "{name}" are being added. Please rename one of them.'

            entry = PendingFile(name=name, size=size)
            if error:
                entry.fail(error)
            added.append(entry)

        self.files.extend(added)
        return added

    def remove(self, name: str) -> None:
        self.files = [f for f in self.files if f.name != name]

    async def _mark_server_duplicates(self, candidates: List[PendingFile]) -> List[PendingFile]:
        try:
            existing = set(
                await self.client.check_document_names(self.user_id, [f.name for f in candidates])
            )
        except ApiError as exc:
            logger.warning("Duplicate-name check failed: %s", exc.message)
            return candidates

        remaining = []
        for entry in candidates:
            if entry.name in existing:
                entry.fail(
                    f'A document with the name "{entry.name}" already exists. '
                    "Please remove and rename the document."
                )
            else:
                remaining.append(entry)
        return remaining

    async def upload(self) -> UploadResult:
        """Create a document record for every valid pending file, in order."""
        result = UploadResult()
        candidates = [f for f in self.files if f.uploadable]
        if not candidates:
            return result

        to_upload = await self._mark_server_duplicates(candidates)
        for entry in to_upload:
            entry.status = UploadStatus.UPLOADING

        for entry in to_upload:
            try:
                await self.client.create_document(
                    name=entry.name,
                    file_size=upload_size_label(entry.size),
                    user_id=self.user_id,
                )
            except ApiError as exc:
                entry.fail(exc.message or "Upload failed")
                result.failed.append(entry.name)
                continue
            entry.status = UploadStatus.SUCCESS
            result.success.append(entry.name)

        logger.info(
            "Upload batch finished",
            extra={"uploaded": len(result.success), "failed": len(result.failed)},
        )
        return result
