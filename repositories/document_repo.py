"""
repositories/document_repo.py
------------------------------
Data access layer for tax documents.
All SQL queries related to the `documents` table live here, including the
post-insert hook that keeps filings and the audit trail in step with
every new document row.
"""

from typing import Optional

from db.connection import get_connection, release_connection, transaction
from models.audit import ACTION_UPLOADED, AuditLog
from models.document import Document, DocumentNotFoundError, validate_status
from repositories.audit_repo import AuditRepository
from repositories.filing_repo import FilingRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "document_id, user_id, document_name, document_type, year, "
    "status, version, lineage_id, is_deleted, created_at"
)


class DocumentRepository:
    """Repository for CRUD operations on the documents table."""

    def __init__(
        self,
        filings: Optional[FilingRepository] = None,
        audit: Optional[AuditRepository] = None,
    ):
        self.filings = filings or FilingRepository()
        self.audit = audit or AuditRepository()

    # ── CREATE ────────────────────────────────────────────

    def add(self, document: Document, cur=None) -> Document:
        """
        Insert a new document and run the post-insert hook.

        The insert, the filing status change and the audit entry commit
        together or not at all.

        Args:
            document: The Document to persist.
            cur: Cursor of an enclosing transaction, if any.

        Returns:
            The same object with its `id` and `created_at` populated.

        Raises:
            ValueError: If the status is not a document status.
        """
        validate_status(document.status)
        if cur is None:
            with transaction(f"add document '{document.name}'") as cur:
                return self.add(document, cur=cur)

        self._insert(cur, document)
        self._after_insert(cur, document)
        logger.info(f"Added document '{document.name}' #{document.id} for user {document.user_id}")
        return document

    def add_version(self, document_id: int, new_name: str, new_status: str) -> Document:
        """
        Store a new version of an existing document.

        The new row copies user, type and year from `document_id`'s row and
        takes the next version number of the whole lineage: for the latest
        version that is its version + 1, for an older version it is the
        lineage maximum + 1, never a duplicate. The lineage's
        first row is locked while the number is chosen, so concurrent
        callers get distinct, increasing versions.

        Args:
            document_id: Any version of the document.
            new_name: Name of the new version.
            new_status: Status of the new version.

        Returns:
            The newly inserted Document.

        Raises:
            ValueError: If `new_status` is not a document status.
            DocumentNotFoundError: If `document_id` does not exist.
        """
        validate_status(new_status)
        with transaction(f"add version of document #{document_id}") as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM documents WHERE document_id = %s;", (document_id,))
            row = cur.fetchone()
            if row is None:
                raise DocumentNotFoundError(document_id)
            source = self._row_to_document(row)
            root_id = source.root_id

            cur.execute("SELECT document_id FROM documents WHERE document_id = %s FOR UPDATE;", (root_id,))
            cur.execute(
                "SELECT MAX(version) FROM documents WHERE COALESCE(lineage_id, document_id) = %s;",
                (root_id,),
            )
            latest = cur.fetchone()[0]

            new_doc = Document(
                user_id=source.user_id,
                name=new_name,
                document_type=source.document_type,
                year=source.year,
                status=new_status,
                version=latest + 1,
                lineage_id=root_id,
            )
            self._insert(cur, new_doc)
            self._after_insert(cur, new_doc)
        logger.info(f"Added version {new_doc.version} of document #{root_id} as #{new_doc.id}")
        return new_doc

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, document_id: int, cur=None) -> Optional[Document]:
        """Fetch a single document row, deleted or not, optionally on an open cursor."""
        sql = f"SELECT {_COLUMNS} FROM documents WHERE document_id = %s;"
        if cur is not None:
            cur.execute(sql, (document_id,))
            row = cur.fetchone()
            return self._row_to_document(row) if row else None

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (document_id,))
                row = cur.fetchone()
                return self._row_to_document(row) if row else None
        finally:
            release_connection(conn)

    def get_by_user(
        self, user_id: int, year: Optional[int] = None, include_deleted: bool = False
    ) -> list[Document]:
        """
        Fetch a user's documents.

        Args:
            user_id: Owning user.
            year: Optional tax year filter.
            include_deleted: Also return soft-deleted rows.

        Returns:
            Every version row, newest first.
        """
        sql = f"SELECT {_COLUMNS} FROM documents WHERE user_id = %s"
        params: list = [user_id]
        if year is not None:
            sql += " AND year = %s"
            params.append(year)
        if not include_deleted:
            sql += " AND is_deleted = FALSE"
        sql += " ORDER BY created_at DESC, document_id DESC;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_document(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_versions(self, document_id: int) -> list[Document]:
        """Every version in the lineage of `document_id`, oldest first."""
        sql = f"""
            SELECT {_COLUMNS} FROM documents
            WHERE COALESCE(lineage_id, document_id) = (
                SELECT COALESCE(lineage_id, document_id) FROM documents WHERE document_id = %s
            )
            ORDER BY version ASC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (document_id,))
                return [self._row_to_document(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    # ── SOFT DELETE ───────────────────────────────────────

    def soft_delete(self, document_id: int, user_id: int, cur=None) -> bool:
        """
        Flag a document row as deleted. The row stays in the table and
        drops out of filing_summary.

        Returns:
            True if the flag flipped, False if the row was missing, owned by
            someone else, or already deleted.
        """
        return self._set_deleted(document_id, user_id, True, cur)

    def restore(self, document_id: int, user_id: int, cur=None) -> bool:
        """Clear the soft-delete flag on a document row."""
        return self._set_deleted(document_id, user_id, False, cur)

    def _set_deleted(self, document_id: int, user_id: int, deleted: bool, cur) -> bool:
        if cur is None:
            verb = "delete" if deleted else "restore"
            with transaction(f"{verb} document #{document_id}") as cur:
                return self._set_deleted(document_id, user_id, deleted, cur)

        cur.execute(
            """
            UPDATE documents SET is_deleted = %s
            WHERE document_id = %s AND user_id = %s AND is_deleted = %s;
            """,
            (deleted, document_id, user_id, not deleted),
        )
        changed = cur.rowcount > 0
        if changed:
            logger.info(f"Document #{document_id} is_deleted={deleted}")
        return changed

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _insert(cur, document: Document) -> None:
        cur.execute(
            """
            INSERT INTO documents
                (user_id, document_name, document_type, year, status, version, lineage_id)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING document_id, created_at;
            """,
            (
                document.user_id, document.name, document.document_type, document.year,
                document.status, document.version, document.lineage_id,
            ),
        )
        document.id, document.created_at = cur.fetchone()

    def _after_insert(self, cur, document: Document) -> None:
        """Post-insert hook: advance the year's filing and log the upload."""
        self.filings.mark_in_progress(document.user_id, document.year, cur=cur)
        self.audit.record(AuditLog(user_id=document.user_id, action=ACTION_UPLOADED, document_id=document.id), cur=cur)

    @staticmethod
    def _row_to_document(row: tuple) -> Document:
        """Convert a database row tuple to a Document domain object."""
        return Document(
            id=row[0],
            user_id=row[1],
            name=row[2],
            document_type=row[3],
            year=row[4],
            status=row[5],
            version=row[6],
            lineage_id=row[7],
            is_deleted=row[8],
            created_at=row[9],
        )
