"""Tests for schema DDL and the connection helpers."""

import pytest

import db.connection as connection
from db.init_db import DROP_SQL, SCHEMA_SQL, create_tables, reset_schema


def _view_sql() -> str:
    return SCHEMA_SQL[SCHEMA_SQL.index("CREATE OR REPLACE VIEW filing_summary"):]


def test_all_tables_created():
    for table in (
        "users", "documents", "document_tags", "document_tag_map",
        "tax_filings", "audit_logs", "reminders", "shared_documents",
    ):
        assert f"CREATE TABLE IF NOT EXISTS {table} (" in SCHEMA_SQL


def test_view_excludes_soft_deleted_and_counts_each_status():
    view = _view_sql()
    assert "WHERE is_deleted = FALSE" in view
    for column in ("total_documents", "pending_review", "reviewed_docs", "approved_docs"):
        assert column in view
    assert "GROUP BY user_id, year" in view


def test_status_domains_enforced_by_check_constraints():
    assert "CHECK (status IN ('uploaded', 'reviewed', 'approved'))" in SCHEMA_SQL
    assert "CHECK (status IN ('not_started', 'in_progress', 'filed'))" in SCHEMA_SQL
    assert "CHECK (permission IN ('view', 'edit'))" in SCHEMA_SQL


def test_one_filing_per_user_year_and_unique_lineage_versions():
    assert "UNIQUE (user_id, filing_year)" in SCHEMA_SQL
    assert "ON documents ((COALESCE(lineage_id, document_id)), version)" in SCHEMA_SQL


def test_no_cascading_deletes():
    assert "ON DELETE" not in SCHEMA_SQL


def test_create_tables_commits(db):
    create_tables()
    assert "CREATE TABLE IF NOT EXISTS users" in db.cur.executed[0][0]
    assert db.commits == 1


def test_reset_drops_then_creates(db):
    reset_schema()
    assert db.cur.executed[0][0] == " ".join(DROP_SQL.split())
    assert db.commits == 2


def test_get_connection_requires_pool(monkeypatch):
    monkeypatch.setattr(connection, "_pool", None)
    with pytest.raises(RuntimeError):
        connection.get_connection()


def test_transaction_rolls_back_and_reraises(db):
    with pytest.raises(KeyError):
        with connection.transaction("do something") as cur:
            cur.execute("SELECT 1;")
            raise KeyError("boom")
    assert db.rollbacks == 1
    assert db.commits == 0


def test_close_pool(db):
    pool = connection._pool
    connection.close_pool()
    assert pool.closed
    assert connection._pool is None
