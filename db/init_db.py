"""
db/init_db.py
-------------
Creates the database schema (tables, indexes, the filing_summary view)
if it does not already exist. Run this module directly to initialize a
fresh database:
    python -m db.init_db            # create missing objects
    python -m db.init_db --reset    # drop everything and re-create
"""

import sys

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users: account identity; credentials are stored only as a hash
CREATE TABLE IF NOT EXISTS users (
    user_id         SERIAL PRIMARY KEY,
    username        VARCHAR(50) UNIQUE NOT NULL,
    email           VARCHAR(100) UNIQUE NOT NULL,
    password_hash   VARCHAR(255) NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Documents: every version is its own row; lineage_id points at the first version
CREATE TABLE IF NOT EXISTS documents (
    document_id     SERIAL PRIMARY KEY,
    user_id         INT REFERENCES users(user_id),
    document_name   VARCHAR(100),
    document_type   VARCHAR(50),
    year            INT,
    status          VARCHAR(20) NOT NULL DEFAULT 'uploaded'
                    CHECK (status IN ('uploaded', 'reviewed', 'approved')),
    version         INT NOT NULL DEFAULT 1,
    lineage_id      INT REFERENCES documents(document_id),
    is_deleted      BOOLEAN NOT NULL DEFAULT FALSE,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Tags: free-form labels, many-to-many with documents
CREATE TABLE IF NOT EXISTS document_tags (
    tag_id          SERIAL PRIMARY KEY,
    tag_name        VARCHAR(50) UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS document_tag_map (
    document_id     INT REFERENCES documents(document_id),
    tag_id          INT REFERENCES document_tags(tag_id),
    PRIMARY KEY (document_id, tag_id)
);

-- Tax filings: one per user per year
CREATE TABLE IF NOT EXISTS tax_filings (
    filing_id       SERIAL PRIMARY KEY,
    user_id         INT REFERENCES users(user_id),
    filing_year     INT NOT NULL,
    status          VARCHAR(20) NOT NULL DEFAULT 'not_started'
                    CHECK (status IN ('not_started', 'in_progress', 'filed')),
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW(),
    is_deleted      BOOLEAN NOT NULL DEFAULT FALSE,
    UNIQUE (user_id, filing_year)
);

-- Audit trail: append-only
CREATE TABLE IF NOT EXISTS audit_logs (
    log_id          SERIAL PRIMARY KEY,
    user_id         INT REFERENCES users(user_id),
    action          VARCHAR(100),
    document_id     INT REFERENCES documents(document_id),
    timestamp       TIMESTAMPTZ DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS reminders (
    reminder_id     SERIAL PRIMARY KEY,
    user_id         INT REFERENCES users(user_id),
    message         VARCHAR(255),
    remind_date     DATE,
    is_done         BOOLEAN NOT NULL DEFAULT FALSE
);

CREATE TABLE IF NOT EXISTS shared_documents (
    share_id          SERIAL PRIMARY KEY,
    document_id       INT REFERENCES documents(document_id),
    shared_with_user  INT REFERENCES users(user_id),
    permission        VARCHAR(10) NOT NULL DEFAULT 'view'
                      CHECK (permission IN ('view', 'edit')),
    UNIQUE (document_id, shared_with_user)
);

-- Version numbers are unique within a lineage
CREATE UNIQUE INDEX IF NOT EXISTS uq_documents_lineage_version
    ON documents ((COALESCE(lineage_id, document_id)), version);

CREATE INDEX IF NOT EXISTS idx_documents_user_year ON documents(user_id, year) WHERE is_deleted = FALSE;
CREATE INDEX IF NOT EXISTS idx_audit_logs_user ON audit_logs(user_id, timestamp);
CREATE INDEX IF NOT EXISTS idx_reminders_due ON reminders(remind_date) WHERE is_done = FALSE;

-- Per (user, year) document counts by status, soft-deleted rows excluded
CREATE OR REPLACE VIEW filing_summary AS
SELECT
    user_id,
    year AS filing_year,
    COUNT(*) AS total_documents,
    SUM(CASE WHEN status = 'uploaded' THEN 1 ELSE 0 END) AS pending_review,
    SUM(CASE WHEN status = 'reviewed' THEN 1 ELSE 0 END) AS reviewed_docs,
    SUM(CASE WHEN status = 'approved' THEN 1 ELSE 0 END) AS approved_docs
FROM documents
WHERE is_deleted = FALSE
GROUP BY user_id, year;
"""

DROP_SQL = """
DROP VIEW IF EXISTS filing_summary;
DROP TABLE IF EXISTS shared_documents, reminders, audit_logs, document_tag_map,
    document_tags, documents, tax_filings, users;
"""


def _run(sql: str, action: str) -> None:
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(sql)
        conn.commit()
        logger.info(f"Database schema {action} completed.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to {action} schema: {e}")
        raise
    finally:
        release_connection(conn)


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables and the summary view.
    Safe to call multiple times (uses IF NOT EXISTS / OR REPLACE).
    """
    _run(SCHEMA_SQL, "initialize")


def drop_tables() -> None:
    """Drop every object created by `create_tables`. Destroys all data."""
    _run(DROP_SQL, "drop")


def reset_schema() -> None:
    """Drop and re-create the schema, for a clean re-run."""
    drop_tables()
    create_tables()


if __name__ == "__main__":
    from db.connection import init_pool, close_pool
    init_pool()
    try:
        if "--reset" in sys.argv[1:]:
            reset_schema()
        else:
            create_tables()
    finally:
        close_pool()
    print("Database schema ready.")
