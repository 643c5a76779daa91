"""Pytest configuration and shared fixtures.

The PostgreSQL pool is replaced with an in-memory fake so repositories run
their real code paths: SQL text, parameters, commit/rollback and row
mapping can all be asserted without a database server.
"""

from collections import deque
from datetime import datetime

import pytest

import db.connection as connection

NOW = datetime(2024, 4, 1, 12, 0, 0)


class FakeCursor:
    """Records executed statements and replays queued results."""

    def __init__(self):
        self.executed: list[tuple[str, object]] = []
        self._one: deque = deque()
        self._all: deque = deque()
        self._rowcounts: deque = deque()
        self.rowcount = -1
        self.fail_on: str | None = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        sql = " ".join(sql.split())
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError(f"forced failure on: {self.fail_on}")
        self.executed.append((sql, params))
        self.rowcount = self._rowcounts.popleft() if self._rowcounts else 1

    def fetchone(self):
        return self._one.popleft() if self._one else None

    def fetchall(self):
        return self._all.popleft() if self._all else []

    # ── queueing helpers used by tests ──
    def returns_one(self, *rows):
        self._one.extend(rows)
        return self

    def returns_all(self, *result_sets):
        self._all.extend(result_sets)
        return self

    def rowcounts(self, *counts):
        self._rowcounts.extend(counts)
        return self

    @property
    def statements(self) -> list[str]:
        return [sql for sql, _ in self.executed]

    def find(self, fragment: str) -> tuple[str, object]:
        """First executed (sql, params) containing `fragment`."""
        for sql, params in self.executed:
            if fragment in sql:
                return sql, params
        raise AssertionError(f"No statement containing {fragment!r} in {self.statements}")


class FakeConnection:
    def __init__(self):
        self.cur = FakeCursor()
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


class FakePool:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.checked_out = 0
        self.borrows = 0
        self.closed = False

    def getconn(self):
        self.checked_out += 1
        self.borrows += 1
        return self.conn

    def putconn(self, conn):
        assert conn is self.conn
        self.checked_out -= 1

    def closeall(self):
        self.closed = True


@pytest.fixture
def db(monkeypatch) -> FakeConnection:
    """Install a fake pool and yield its single connection.

    Asserts after the test that every borrowed connection was returned.
    """
    conn = FakeConnection()
    fake_pool = FakePool(conn)
    conn.pool = fake_pool
    monkeypatch.setattr(connection, "_pool", fake_pool)
    yield conn
    assert fake_pool.checked_out == 0, "connection leaked from pool"


def document_row(
    document_id=1,
    user_id=1,
    name="Form16_2023.pdf",
    document_type="Income",
    year=2023,
    status="uploaded",
    version=1,
    lineage_id=None,
    is_deleted=False,
):
    """A documents row in repository column order."""
    return (document_id, user_id, name, document_type, year, status, version, lineage_id, is_deleted, NOW)
