"""
services/document_service.py
-----------------------------
Business logic for uploading, versioning, deleting and sharing documents.
Each operation runs in one transaction together with its audit entry.
"""

from typing import Iterable

from db.connection import transaction
from models.audit import ACTION_DELETED, ACTION_RESTORED, ACTION_SHARED, AuditLog
from models.document import Document, DocumentNotFoundError
from models.share import SharedDocument
from repositories.audit_repo import AuditRepository
from repositories.document_repo import DocumentRepository
from repositories.share_repo import ShareRepository
from repositories.tag_repo import TagRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class DocumentService:
    """
    Handles the document lifecycle.

    Responsibilities:
        - Upload documents with their tags.
        - Add new versions while keeping history.
        - Soft-delete and restore, recording both in the audit trail.
        - Share documents with other users.
    """

    def __init__(self):
        self.audit = AuditRepository()
        self.documents = DocumentRepository(audit=self.audit)
        self.tags = TagRepository()
        self.shares = ShareRepository()

    def upload(
        self,
        user_id: int,
        name: str,
        document_type: str,
        year: int,
        tags: Iterable[str] = (),
    ) -> Document:
        """
        Store a newly uploaded document and attach its tags.

        Args:
            user_id: Owning user.
            name: File name.
            document_type: Category, e.g. 'Income'.
            year: Tax year.
            tags: Tag names; missing tags are created.

        Returns:
            The stored Document.
        """
        document = Document(user_id=user_id, name=name, document_type=document_type, year=year)
        with transaction(f"upload '{name}'") as cur:
            self.documents.add(document, cur=cur)
            for tag_name in tags:
                tag = self.tags.add(tag_name, cur=cur)
                self.tags.tag_document(document.id, tag.id, cur=cur)
        return document

    def new_version(self, document_id: int, new_name: str, new_status: str) -> Document:
        """Add a new version of a document; see DocumentRepository.add_version."""
        return self.documents.add_version(document_id, new_name, new_status)

    def delete(self, document_id: int, user_id: int) -> bool:
        """Soft-delete one document row owned by `user_id`."""
        with transaction(f"delete document #{document_id}") as cur:
            deleted = self.documents.soft_delete(document_id, user_id, cur=cur)
            if deleted:
                self.audit.record(AuditLog(user_id=user_id, action=ACTION_DELETED, document_id=document_id), cur=cur)
        return deleted

    def restore(self, document_id: int, user_id: int) -> bool:
        """Undo a soft delete."""
        with transaction(f"restore document #{document_id}") as cur:
            restored = self.documents.restore(document_id, user_id, cur=cur)
            if restored:
                self.audit.record(AuditLog(user_id=user_id, action=ACTION_RESTORED, document_id=document_id), cur=cur)
        return restored

    def share(self, document_id: int, with_user_id: int, permission: str = "view") -> SharedDocument:
        """
        Grant another user access to a document.

        Raises:
            DocumentNotFoundError: If the document does not exist.
            ValueError: If the document belongs to `with_user_id` already,
                or the permission is invalid.
        """
        grant = SharedDocument(document_id=document_id, shared_with_user=with_user_id, permission=permission)
        with transaction(f"share document #{document_id}") as cur:
            document = self.documents.get_by_id(document_id, cur=cur)
            if document is None:
                raise DocumentNotFoundError(document_id)
            if document.user_id == with_user_id:
                raise ValueError(f"Document #{document_id} already belongs to user {with_user_id}")
            self.shares.share(grant, cur=cur)
            self.audit.record(AuditLog(user_id=document.user_id, action=ACTION_SHARED, document_id=document_id), cur=cur)
        return grant
