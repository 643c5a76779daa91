"""
models/user.py
--------------
Domain model for user accounts.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    """
    A registered account. Only the password hash is ever stored.

    Attributes:
        id: Database primary key (None for new records).
        username: Unique login name.
        email: Unique contact address.
        password_hash: Opaque credential hash.
        created_at: Timestamp when the record was created.
    """
    username: str
    email: str
    password_hash: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"{self.username} <{self.email}>"
