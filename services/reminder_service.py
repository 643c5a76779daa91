"""
services/reminder_service.py
-----------------------------
Business logic for user reminders.
"""

from datetime import date
from typing import Optional

from models.reminder import Reminder
from repositories.reminder_repo import ReminderRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class ReminderService:
    """Creates reminders and reports which ones are due."""

    def __init__(self):
        self.repo = ReminderRepository()

    def add(self, user_id: int, message: str, remind_date: date) -> Reminder:
        """Create a reminder; blank messages are rejected with ValueError."""
        if not message.strip():
            raise ValueError("Reminder message must not be empty")
        return self.repo.add(Reminder(user_id=user_id, message=message.strip(), remind_date=remind_date))

    def due_reminders(self, today: Optional[date] = None) -> list[Reminder]:
        """Open reminders due on or before `today` (defaults to the current date)."""
        today = today or date.today()
        due = self.repo.get_due(today)
        logger.info(f"{len(due)} reminder(s) due as of {today}")
        return due

    def complete(self, reminder_id: int, user_id: int) -> bool:
        """Mark a user's reminder done. False if it is not theirs or does not exist."""
        return self.repo.mark_done(reminder_id, user_id)
