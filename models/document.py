"""
models/document.py
------------------
Domain models for uploaded tax documents and their tags.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DOCUMENT_STATUSES: tuple[str, ...] = ("uploaded", "reviewed", "approved")


class DocumentNotFoundError(LookupError):
    """Raised when an operation targets a document id that does not exist."""

    def __init__(self, document_id: int):
        super().__init__(f"Document #{document_id} does not exist")
        self.document_id = document_id


@dataclass
class Document:
    """
    One immutable version of a tax document.

    A new version is a new row: same user, type and year, a higher
    `version`, and `lineage_id` pointing at the first version's id.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owning user.
        name: File name as uploaded (e.g. 'Form16_2023.pdf').
        document_type: Free-form category (e.g. 'Income').
        year: Tax year the document supports.
        status: One of DOCUMENT_STATUSES.
        version: 1 for originals, previous + 1 for each new version.
        lineage_id: Id of the first version, None on the first version itself.
        is_deleted: Soft-delete flag.
        created_at: Timestamp when the record was created.
    """
    user_id: int
    name: str
    document_type: str
    year: int
    status: str = "uploaded"
    version: int = 1
    lineage_id: Optional[int] = None
    is_deleted: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def root_id(self) -> Optional[int]:
        """Id shared by every version of this document."""
        return self.lineage_id if self.lineage_id is not None else self.id

    def __str__(self) -> str:
        deleted = " (deleted)" if self.is_deleted else ""
        return f"#{self.id} {self.name} v{self.version} [{self.status}] {self.year}{deleted}"


@dataclass
class Tag:
    """A free-form label attachable to any number of documents."""
    name: str
    id: Optional[int] = None


def validate_status(status: str) -> str:
    """Return `status` unchanged, or raise ValueError if it is not a document status."""
    if status not in DOCUMENT_STATUSES:
        raise ValueError(
            f"Invalid document status '{status}'. Expected one of: {', '.join(DOCUMENT_STATUSES)}"
        )
    return status
