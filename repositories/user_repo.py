"""
repositories/user_repo.py
--------------------------
Data access layer for user accounts.
"""

from typing import Optional

from db.connection import get_connection, release_connection, transaction
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "user_id, username, email, password_hash, created_at"


class UserRepository:
    """Repository for CRUD operations on the users table."""

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            psycopg2.errors.UniqueViolation: If the username or email is taken.
        """
        sql = """
            INSERT INTO users (username, email, password_hash)
            VALUES (%s, %s, %s)
            RETURNING user_id, created_at;
        """
        with transaction(f"add user '{user.username}'") as cur:
            cur.execute(sql, (user.username, user.email, user.password_hash))
            user.id, user.created_at = cur.fetchone()
        logger.info(f"Added user '{user.username}' #{user.id}")
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Fetch a user by primary key."""
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE user_id = %s;", (user_id,))

    def get_by_username(self, username: str) -> Optional[User]:
        """Fetch a user by their unique username."""
        return self._fetch_one(f"SELECT {_COLUMNS} FROM users WHERE username = %s;", (username,))

    def get_all(self) -> list[User]:
        """All users, oldest first."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id;")
                return [self._row_to_user(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    def _fetch_one(self, sql: str, params: tuple) -> Optional[User]:
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Convert a database row tuple to a User domain object."""
        return User(
            id=row[0],
            username=row[1],
            email=row[2],
            password_hash=row[3],
            created_at=row[4],
        )
