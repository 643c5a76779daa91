"""Tests for the user, tag, audit, reminder and share repositories."""

from datetime import date

import pytest

from models.audit import AuditLog
from models.reminder import Reminder
from models.share import SharedDocument
from models.user import User
from repositories.audit_repo import AuditRepository
from repositories.reminder_repo import ReminderRepository
from repositories.share_repo import ShareRepository
from repositories.tag_repo import TagRepository
from repositories.user_repo import UserRepository
from tests.conftest import NOW, document_row


class TestUserRepository:
    def test_add(self, db):
        db.cur.returns_one((1, NOW))
        user = UserRepository().add(User(username="john_doe", email="john@example.com", password_hash="h"))
        assert user.id == 1
        assert db.cur.executed[0][1] == ("john_doe", "john@example.com", "h")

    def test_duplicate_username_rolls_back(self, db):
        db.cur.fail_on = "INSERT INTO users"
        with pytest.raises(RuntimeError):
            UserRepository().add(User(username="john_doe", email="john@example.com", password_hash="h"))
        assert db.rollbacks == 1

    def test_get_by_username(self, db):
        db.cur.returns_one((2, "jane_smith", "jane@example.com", "h", NOW))
        user = UserRepository().get_by_username("jane_smith")
        assert user.id == 2
        assert str(user) == "jane_smith <jane@example.com>"


class TestTagRepository:
    def test_add_is_get_or_create(self, db):
        db.cur.returns_one((3,))
        tag = TagRepository().add("Medical")
        assert (tag.id, tag.name) == (3, "Medical")
        assert "ON CONFLICT (tag_name)" in db.cur.statements[0]

    def test_tag_document_ignores_duplicates(self, db):
        db.cur.rowcounts(0)
        assert TagRepository().tag_document(1, 3) is False
        assert "DO NOTHING" in db.cur.statements[0]

    def test_tags_for_document(self, db):
        db.cur.returns_all([(1, "Income")])
        tags = TagRepository().get_tags_for_document(1)
        assert [t.name for t in tags] == ["Income"]
        assert db.cur.executed[0][1] == (1,)

    def test_documents_by_tag_skips_deleted(self, db):
        db.cur.returns_all([document_row(document_id=2)])
        docs = TagRepository().get_documents_by_tag("Income", user_id=1)
        sql, params = db.cur.executed[0]
        assert "d.is_deleted = FALSE" in sql
        assert params == ["Income", 1]
        assert docs[0].id == 2


class TestAuditRepository:
    def test_record_standalone(self, db):
        db.cur.returns_one((10, NOW))
        entry = AuditRepository().record(AuditLog(user_id=1, action="Filed tax return"))
        assert entry.id == 10
        assert db.cur.executed[0][1] == (1, "Filed tax return", None)
        assert db.commits == 1

    def test_get_by_user_with_limit(self, db):
        db.cur.returns_all([(10, 1, "Uploaded document", 1, NOW)])
        entries = AuditRepository().get_by_user(1, limit=5)
        sql, params = db.cur.executed[0]
        assert sql.endswith("LIMIT %s;")
        assert params == [1, 5]
        assert entries[0].document_id == 1


class TestReminderRepository:
    def test_get_due(self, db):
        db.cur.returns_all([(1, 1, "File tax return for 2023", date(2025, 7, 31), False)])
        due = ReminderRepository().get_due(date(2025, 8, 1))
        assert due[0].message == "File tax return for 2023"
        assert db.cur.executed[0][1] == (date(2025, 8, 1),)

    def test_add_and_mark_done(self, db):
        db.cur.returns_one((4,))
        repo = ReminderRepository()
        reminder = repo.add(Reminder(user_id=1, message="x", remind_date=date(2025, 1, 1)))
        assert reminder.id == 4
        assert repo.mark_done(4, 1) is True
        assert db.commits == 2

    def test_get_all_pending_only(self, db):
        ReminderRepository().get_all(1)
        assert "is_done = FALSE" in db.cur.executed[0][0]


class TestShareRepository:
    def test_share_upserts_permission(self, db):
        db.cur.returns_one((8,))
        grant = ShareRepository().share(SharedDocument(document_id=1, shared_with_user=2, permission="edit"))
        assert grant.id == 8
        assert "DO UPDATE SET permission" in db.cur.statements[0]

    def test_invalid_permission(self, db):
        with pytest.raises(ValueError):
            ShareRepository().share(SharedDocument(document_id=1, shared_with_user=2, permission="owner"))

    def test_get_shares_joins_document_name(self, db):
        db.cur.returns_all([(8, 1, 2, "view", "Form16_2023.pdf")])
        shares = ShareRepository().get_shares()
        assert shares[0].document_name == "Form16_2023.pdf"
        assert "JOIN documents d" in db.cur.statements[0]

    def test_revoke(self, db):
        db.cur.rowcounts(0)
        assert ShareRepository().revoke(1, 2) is False


class TestRemainingReads:
    def test_user_get_by_id(self, db):
        db.cur.returns_one((1, "john_doe", "john@example.com", "h", NOW))
        user = UserRepository().get_by_id(1)
        assert user.username == "john_doe"
        assert db.cur.executed[0][1] == (1,)

    def test_user_get_by_id_missing(self, db):
        assert UserRepository().get_by_id(99) is None

    def test_user_get_all(self, db):
        db.cur.returns_all([(1, "john_doe", "john@example.com", "h", NOW), (2, "jane_smith", "jane@example.com", "h", NOW)])
        users = UserRepository().get_all()
        assert [u.id for u in users] == [1, 2]
        assert db.cur.statements[0].endswith("ORDER BY user_id;")

    def test_tag_get_all(self, db):
        db.cur.returns_all([(2, "Investment"), (1, "Income")])
        tags = TagRepository().get_all()
        assert [t.name for t in tags] == ["Investment", "Income"]
        assert db.cur.statements[0].endswith("ORDER BY tag_name;")

    def test_untag_document_removed(self, db):
        assert TagRepository().untag_document(1, 3) is True
        sql, params = db.cur.executed[0]
        assert sql.startswith("DELETE FROM document_tag_map")
        assert params == (1, 3)
        assert db.commits == 1

    def test_untag_document_not_attached(self, db):
        db.cur.rowcounts(0)
        assert TagRepository().untag_document(1, 3) is False

    def test_audit_get_by_document(self, db):
        db.cur.returns_all([(10, 1, "Uploaded document", 7, NOW), (11, 1, "Shared document", 7, NOW)])
        entries = AuditRepository().get_by_document(7)
        assert [e.action for e in entries] == ["Uploaded document", "Shared document"]
        sql, params = db.cur.executed[0]
        assert "WHERE document_id = %s" in sql
        assert params == (7,)

    def test_shared_with_excludes_deleted_documents(self, db):
        db.cur.returns_all([(8, 1, 2, "view", "Form16_2023.pdf")])
        shares = ShareRepository().get_shared_with(2)
        sql, params = db.cur.executed[0]
        assert "sd.shared_with_user = %s" in sql
        assert "d.is_deleted = FALSE" in sql
        assert params == [2]
        assert shares[0].document_name == "Form16_2023.pdf"
