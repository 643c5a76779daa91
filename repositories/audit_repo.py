"""
repositories/audit_repo.py
---------------------------
Data access layer for the append-only audit trail.
Entries are only ever inserted and read.
"""

from typing import Optional

from db.connection import get_connection, release_connection, transaction
from models.audit import AuditLog
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "log_id, user_id, action, document_id, timestamp"


class AuditRepository:
    """Repository for appending to and reading the audit_logs table."""

    def record(self, entry: AuditLog, cur=None) -> AuditLog:
        """
        Append an audit entry.

        Args:
            entry: The entry to persist.
            cur: Cursor of an enclosing transaction. When omitted the entry
                is written in its own transaction.

        Returns:
            The same entry with `id` and `timestamp` populated.
        """
        if cur is None:
            with transaction(f"record audit '{entry.action}'") as cur:
                return self.record(entry, cur=cur)

        cur.execute(
            """
            INSERT INTO audit_logs (user_id, action, document_id)
            VALUES (%s, %s, %s)
            RETURNING log_id, timestamp;
            """,
            (entry.user_id, entry.action, entry.document_id),
        )
        entry.id, entry.timestamp = cur.fetchone()
        logger.debug(f"Audit #{entry.id}: user {entry.user_id} {entry.action} {entry.document_id}")
        return entry

    def get_by_user(self, user_id: int, limit: Optional[int] = None) -> list[AuditLog]:
        """A user's audit trail, newest first."""
        sql = f"SELECT {_COLUMNS} FROM audit_logs WHERE user_id = %s ORDER BY timestamp DESC, log_id DESC"
        params: list = [user_id]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)
        return self._fetch_all(sql + ";", params)

    def get_by_document(self, document_id: int) -> list[AuditLog]:
        """Every entry that references a document, oldest first."""
        sql = f"SELECT {_COLUMNS} FROM audit_logs WHERE document_id = %s ORDER BY log_id;"
        return self._fetch_all(sql, (document_id,))

    def _fetch_all(self, sql: str, params) -> list[AuditLog]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_entry(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_entry(row: tuple) -> AuditLog:
        return AuditLog(
            id=row[0],
            user_id=row[1],
            action=row[2],
            document_id=row[3],
            timestamp=row[4],
        )
