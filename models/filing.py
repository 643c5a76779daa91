"""
models/filing.py
----------------
Domain models for per-year tax filings and the filing summary report.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

FILING_STATUSES: tuple[str, ...] = ("not_started", "in_progress", "filed")


@dataclass
class TaxFiling:
    """
    A user's tax submission for one year, distinct from its supporting documents.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owning user.
        year: The filing year.
        status: One of FILING_STATUSES.
        is_deleted: Soft-delete flag.
        created_at: Timestamp when the record was created.
        updated_at: Timestamp of the last status change.
    """
    user_id: int
    year: int
    status: str = "not_started"
    is_deleted: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"{self.year}: {self.status}"


@dataclass
class FilingSummary:
    """One row of the filing_summary view."""
    user_id: int
    year: int
    total_documents: int
    pending_review: int
    reviewed_docs: int
    approved_docs: int
