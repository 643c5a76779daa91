"""
repositories/filing_repo.py
----------------------------
Data access layer for tax filings and the filing_summary view.
"""

from typing import Optional

from config import AUTO_CREATE_FILINGS
from db.connection import get_connection, release_connection, transaction
from models.filing import FILING_STATUSES, FilingSummary, TaxFiling
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "filing_id, user_id, filing_year, status, is_deleted, created_at, updated_at"


class FilingRepository:
    """
    Repository for the tax_filings table.

    Args:
        auto_create: When True, `mark_in_progress` creates the filing for a
            (user, year) that has none instead of silently doing nothing.
    """

    def __init__(self, auto_create: bool = AUTO_CREATE_FILINGS):
        self.auto_create = auto_create

    # ── CREATE ────────────────────────────────────────────

    def add(self, filing: TaxFiling) -> TaxFiling:
        """
        Insert a new filing.

        Raises:
            ValueError: If the status is not one of FILING_STATUSES.
            psycopg2.errors.UniqueViolation: If the user already has a filing for that year.
        """
        _validate_status(filing.status)
        sql = """
            INSERT INTO tax_filings (user_id, filing_year, status)
            VALUES (%s, %s, %s)
            RETURNING filing_id, created_at, updated_at;
        """
        with transaction(f"add filing {filing.year} for user {filing.user_id}") as cur:
            cur.execute(sql, (filing.user_id, filing.year, filing.status))
            filing.id, filing.created_at, filing.updated_at = cur.fetchone()
        logger.info(f"Added filing #{filing.id} ({filing.year}) for user {filing.user_id}")
        return filing

    # ── READ ──────────────────────────────────────────────

    def get(self, user_id: int, year: int) -> Optional[TaxFiling]:
        """Fetch the filing for a user and year, deleted or not."""
        sql = f"SELECT {_COLUMNS} FROM tax_filings WHERE user_id = %s AND filing_year = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id, year))
                row = cur.fetchone()
                return self._row_to_filing(row) if row else None
        finally:
            release_connection(conn)

    def get_by_user(self, user_id: int, include_deleted: bool = False) -> list[TaxFiling]:
        """All filings of a user, most recent year first."""
        sql = f"SELECT {_COLUMNS} FROM tax_filings WHERE user_id = %s"
        if not include_deleted:
            sql += " AND is_deleted = FALSE"
        sql += " ORDER BY filing_year DESC;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_filing(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_summary(self, user_id: Optional[int] = None, year: Optional[int] = None) -> list[FilingSummary]:
        """
        Read the filing_summary view.

        Args:
            user_id: Restrict to one user.
            year: Restrict to one filing year.

        Returns:
            FilingSummary rows ordered by user and year. Only non-deleted
            documents are counted.
        """
        sql = (
            "SELECT user_id, filing_year, total_documents, pending_review, reviewed_docs, approved_docs "
            "FROM filing_summary WHERE TRUE"
        )
        params: list = []
        if user_id is not None:
            sql += " AND user_id = %s"
            params.append(user_id)
        if year is not None:
            sql += " AND filing_year = %s"
            params.append(year)
        sql += " ORDER BY user_id, filing_year;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    FilingSummary(
                        user_id=r[0],
                        year=r[1],
                        total_documents=int(r[2]),
                        pending_review=int(r[3]),
                        reviewed_docs=int(r[4]),
                        approved_docs=int(r[5]),
                    )
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)

    # ── UPDATE ────────────────────────────────────────────

    def update_status(self, user_id: int, year: int, status: str, cur=None) -> bool:
        """
        Set the status of a user's filing for a year.

        Returns:
            True if a filing was updated, False if none exists.
        """
        _validate_status(status)
        if cur is None:
            with transaction(f"update filing {year} for user {user_id}") as cur:
                return self.update_status(user_id, year, status, cur=cur)

        cur.execute(
            """
            UPDATE tax_filings SET status = %s, updated_at = NOW()
            WHERE user_id = %s AND filing_year = %s;
            """,
            (status, user_id, year),
        )
        updated = cur.rowcount > 0
        if updated:
            logger.info(f"Filing {year} for user {user_id} is now '{status}'")
        return updated

    def mark_in_progress(self, user_id: int, year: int, cur=None) -> bool:
        """
        Move the (user, year) filing to in_progress after a document arrives.

        With `auto_create` enabled a missing filing is created already in
        progress; otherwise a missing filing is left missing. A soft-deleted
        filing is moved to in_progress and keeps its is_deleted flag.

        Returns:
            True if a filing row was created or updated.
        """
        if cur is None:
            with transaction(f"mark filing {year} in progress for user {user_id}") as cur:
                return self.mark_in_progress(user_id, year, cur=cur)

        if self.auto_create:
            cur.execute(
                """
                INSERT INTO tax_filings (user_id, filing_year, status)
                VALUES (%s, %s, 'in_progress')
                ON CONFLICT (user_id, filing_year)
                DO UPDATE SET status = 'in_progress', updated_at = NOW();
                """,
                (user_id, year),
            )
        else:
            cur.execute(
                """
                UPDATE tax_filings SET status = 'in_progress', updated_at = NOW()
                WHERE user_id = %s AND filing_year = %s;
                """,
                (user_id, year),
            )
        touched = cur.rowcount > 0
        if not touched:
            logger.warning(f"No filing {year} for user {user_id}; status left unchanged")
        return touched

    # ── DELETE ────────────────────────────────────────────

    def soft_delete(self, user_id: int, year: int) -> bool:
        """Flag a filing as deleted. The row is kept."""
        sql = """
            UPDATE tax_filings SET is_deleted = TRUE, updated_at = NOW()
            WHERE user_id = %s AND filing_year = %s AND is_deleted = FALSE;
        """
        with transaction(f"delete filing {year} for user {user_id}") as cur:
            cur.execute(sql, (user_id, year))
            deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Soft-deleted filing {year} for user {user_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_filing(row: tuple) -> TaxFiling:
        """Convert a database row tuple to a TaxFiling domain object."""
        return TaxFiling(
            id=row[0],
            user_id=row[1],
            year=row[2],
            status=row[3],
            is_deleted=row[4],
            created_at=row[5],
            updated_at=row[6],
        )


def _validate_status(status: str) -> None:
    if status not in FILING_STATUSES:
        raise ValueError(
            f"Invalid filing status '{status}'. Expected one of: {', '.join(FILING_STATUSES)}"
        )
