"""
models/audit.py
---------------
Domain model for audit trail entries.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

ACTION_UPLOADED = "Uploaded document"
ACTION_DELETED = "Deleted document"
ACTION_RESTORED = "Restored document"
ACTION_SHARED = "Shared document"
ACTION_FILED = "Filed tax return"


@dataclass
class AuditLog:
    """An append-only record of something a user did, optionally tied to a document."""
    user_id: int
    action: str
    document_id: Optional[int] = None
    id: Optional[int] = None
    timestamp: Optional[datetime] = None

    def __str__(self) -> str:
        target = f" #{self.document_id}" if self.document_id is not None else ""
        return f"{self.timestamp} {self.action}{target}"
