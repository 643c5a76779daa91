"""
repositories/reminder_repo.py
------------------------------
Data access layer for reminders.
"""

from datetime import date

from db.connection import get_connection, release_connection, transaction
from models.reminder import Reminder
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "reminder_id, user_id, message, remind_date, is_done"


class ReminderRepository:
    """Repository for CRUD operations on the reminders table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, reminder: Reminder) -> Reminder:
        """Insert a new reminder and return it with its `id` populated."""
        sql = """
            INSERT INTO reminders (user_id, message, remind_date, is_done)
            VALUES (%s, %s, %s, %s)
            RETURNING reminder_id;
        """
        with transaction("add reminder") as cur:
            cur.execute(sql, (reminder.user_id, reminder.message, reminder.remind_date, reminder.is_done))
            reminder.id = cur.fetchone()[0]
        logger.info(f"Added reminder #{reminder.id} for user {reminder.user_id} on {reminder.remind_date}")
        return reminder

    # ── READ ──────────────────────────────────────────────

    def get_all(self, user_id: int, pending_only: bool = True) -> list[Reminder]:
        """
        Get a user's reminders, soonest first.

        Args:
            user_id: Owning user.
            pending_only: If True, skip reminders already marked done.
        """
        sql = f"SELECT {_COLUMNS} FROM reminders WHERE user_id = %s"
        if pending_only:
            sql += " AND is_done = FALSE"
        sql += " ORDER BY remind_date ASC, reminder_id ASC;"
        return self._fetch_all(sql, (user_id,))

    def get_due(self, on_or_before: date) -> list[Reminder]:
        """Open reminders of every user due on or before a date."""
        sql = f"""
            SELECT {_COLUMNS} FROM reminders
            WHERE is_done = FALSE AND remind_date <= %s
            ORDER BY remind_date ASC, reminder_id ASC;
        """
        return self._fetch_all(sql, (on_or_before,))

    # ── UPDATE ────────────────────────────────────────────

    def mark_done(self, reminder_id: int, user_id: int) -> bool:
        """Complete a reminder, scoped to its owner."""
        sql = "UPDATE reminders SET is_done = TRUE WHERE reminder_id = %s AND user_id = %s;"
        with transaction(f"complete reminder #{reminder_id}") as cur:
            cur.execute(sql, (reminder_id, user_id))
            updated = cur.rowcount > 0
        return updated

    # ── HELPERS ───────────────────────────────────────────

    def _fetch_all(self, sql: str, params: tuple) -> list[Reminder]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_reminder(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_reminder(row: tuple) -> Reminder:
        return Reminder(
            id=row[0],
            user_id=row[1],
            message=row[2],
            remind_date=row[3],
            is_done=row[4],
        )
