"""
models/share.py
---------------
Domain model for documents shared with other users.
"""

from dataclasses import dataclass
from typing import Optional

SHARE_PERMISSIONS: tuple[str, ...] = ("view", "edit")


@dataclass
class SharedDocument:
    """
    A grant letting another user view or edit a document.

    `document_name` is only filled when the grant is read back joined
    with its document.
    """
    document_id: int
    shared_with_user: int
    permission: str = "view"
    id: Optional[int] = None
    document_name: Optional[str] = None
