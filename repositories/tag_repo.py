"""
repositories/tag_repo.py
-------------------------
Data access layer for document tags and the document/tag association.
"""

from db.connection import get_connection, release_connection, transaction
from models.document import Document, Tag
from repositories.document_repo import _COLUMNS as _DOCUMENT_COLUMNS, DocumentRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class TagRepository:
    """Repository for the document_tags and document_tag_map tables."""

    def add(self, name: str, cur=None) -> Tag:
        """
        Return the tag called `name`, creating it if needed.
        Uses PostgreSQL's ON CONFLICT (upsert) so the id comes back either way.
        """
        if cur is None:
            with transaction(f"add tag '{name}'") as cur:
                return self.add(name, cur=cur)

        cur.execute(
            """
            INSERT INTO document_tags (tag_name) VALUES (%s)
            ON CONFLICT (tag_name) DO UPDATE SET tag_name = EXCLUDED.tag_name
            RETURNING tag_id;
            """,
            (name,),
        )
        return Tag(id=cur.fetchone()[0], name=name)

    def get_all(self) -> list[Tag]:
        """Every tag, alphabetically."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("SELECT tag_id, tag_name FROM document_tags ORDER BY tag_name;")
                return [Tag(id=r[0], name=r[1]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def tag_document(self, document_id: int, tag_id: int, cur=None) -> bool:
        """
        Attach a tag to a document.

        Returns:
            True if newly attached, False if it already was.

        Raises:
            psycopg2.errors.ForeignKeyViolation: If the document or tag does not exist.
        """
        if cur is None:
            with transaction(f"tag document #{document_id}") as cur:
                return self.tag_document(document_id, tag_id, cur=cur)

        cur.execute(
            """
            INSERT INTO document_tag_map (document_id, tag_id) VALUES (%s, %s)
            ON CONFLICT (document_id, tag_id) DO NOTHING;
            """,
            (document_id, tag_id),
        )
        return cur.rowcount > 0

    def untag_document(self, document_id: int, tag_id: int) -> bool:
        """Detach a tag from a document."""
        sql = "DELETE FROM document_tag_map WHERE document_id = %s AND tag_id = %s;"
        with transaction(f"untag document #{document_id}") as cur:
            cur.execute(sql, (document_id, tag_id))
            removed = cur.rowcount > 0
        return removed

    def get_tags_for_document(self, document_id: int) -> list[Tag]:
        """Tags attached to one document row."""
        sql = """
            SELECT t.tag_id, t.tag_name
            FROM document_tags t
            JOIN document_tag_map dtm ON t.tag_id = dtm.tag_id
            WHERE dtm.document_id = %s
            ORDER BY t.tag_name;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (document_id,))
                return [Tag(id=r[0], name=r[1]) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def get_documents_by_tag(self, tag_name: str, user_id: int | None = None) -> list[Document]:
        """Non-deleted documents carrying a tag, optionally for one user."""
        columns = ", ".join(f"d.{c.strip()}" for c in _DOCUMENT_COLUMNS.split(","))
        sql = f"""
            SELECT {columns}
            FROM documents d
            JOIN document_tag_map dtm ON d.document_id = dtm.document_id
            JOIN document_tags t ON t.tag_id = dtm.tag_id
            WHERE t.tag_name = %s AND d.is_deleted = FALSE
        """
        params: list = [tag_name]
        if user_id is not None:
            sql += " AND d.user_id = %s"
            params.append(user_id)
        sql += " ORDER BY d.document_id;"

        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [DocumentRepository._row_to_document(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)
