"""
repositories/share_repo.py
---------------------------
Data access layer for documents shared with other users.
"""

from typing import Optional

from db.connection import get_connection, release_connection, transaction
from models.share import SHARE_PERMISSIONS, SharedDocument
from utils.logger import get_logger

logger = get_logger(__name__)

_JOINED_SELECT = """
    SELECT sd.share_id, sd.document_id, sd.shared_with_user, sd.permission, d.document_name
    FROM shared_documents sd
    JOIN documents d ON sd.document_id = d.document_id
"""


class ShareRepository:
    """Repository for the shared_documents table."""

    def share(self, shared: SharedDocument, cur=None) -> SharedDocument:
        """
        Grant a user access to a document, or change the permission of an
        existing grant.

        Raises:
            ValueError: If the permission is not 'view' or 'edit'.
        """
        if shared.permission not in SHARE_PERMISSIONS:
            raise ValueError(
                f"Invalid permission '{shared.permission}'. Expected one of: {', '.join(SHARE_PERMISSIONS)}"
            )
        if cur is None:
            with transaction(f"share document #{shared.document_id}") as cur:
                return self.share(shared, cur=cur)

        cur.execute(
            """
            INSERT INTO shared_documents (document_id, shared_with_user, permission)
            VALUES (%s, %s, %s)
            ON CONFLICT (document_id, shared_with_user)
            DO UPDATE SET permission = EXCLUDED.permission
            RETURNING share_id;
            """,
            (shared.document_id, shared.shared_with_user, shared.permission),
        )
        shared.id = cur.fetchone()[0]
        logger.info(
            f"Document #{shared.document_id} shared with user {shared.shared_with_user} ({shared.permission})"
        )
        return shared

    def get_shares(self, document_id: Optional[int] = None) -> list[SharedDocument]:
        """Grants with their document names, for one document or all."""
        sql = _JOINED_SELECT
        params: list = []
        if document_id is not None:
            sql += " WHERE sd.document_id = %s"
            params.append(document_id)
        return self._fetch_all(sql + " ORDER BY sd.share_id;", params)

    def get_shared_with(self, user_id: int) -> list[SharedDocument]:
        """Non-deleted documents other users have shared with `user_id`."""
        sql = _JOINED_SELECT + " WHERE sd.shared_with_user = %s AND d.is_deleted = FALSE ORDER BY sd.share_id;"
        return self._fetch_all(sql, [user_id])

    def revoke(self, document_id: int, user_id: int) -> bool:
        """Remove a user's access to a document."""
        sql = "DELETE FROM shared_documents WHERE document_id = %s AND shared_with_user = %s;"
        with transaction(f"revoke share of document #{document_id}") as cur:
            cur.execute(sql, (document_id, user_id))
            revoked = cur.rowcount > 0
        if revoked:
            logger.info(f"Revoked user {user_id}'s access to document #{document_id}")
        return revoked

    def _fetch_all(self, sql: str, params: list) -> list[SharedDocument]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [
                    SharedDocument(
                        id=r[0],
                        document_id=r[1],
                        shared_with_user=r[2],
                        permission=r[3],
                        document_name=r[4],
                    )
                    for r in cur.fetchall()
                ]
        finally:
            release_connection(conn)
