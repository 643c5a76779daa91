"""
models/reminder.py
------------------
Domain model for user reminders.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class Reminder:
    """
    A dated message for a user, e.g. a filing deadline.

    Attributes:
        id: Database primary key (None for new records).
        user_id: Owning user.
        message: Reminder text.
        remind_date: Date the reminder falls due.
        is_done: Whether the user has completed it.
    """
    user_id: int
    message: str
    remind_date: date
    is_done: bool = False
    id: Optional[int] = None

    def is_due(self, today: date) -> bool:
        """True if still open and due on or before `today`."""
        return not self.is_done and self.remind_date <= today

    def __str__(self) -> str:
        status = "done" if self.is_done else "open"
        return f"[{status}] {self.remind_date}: {self.message}"
