"""
PostgreSQL repository adapter - Implements UserStore and PersonRepository.

This module provides the PostgreSQL implementation of the domain's
person storage ports using psycopg3 with raw SQL.

Uniqueness
----------
Usernames and email addresses are unique case-insensitively via
expression indexes on ``lower(username)`` and ``lower(email)``. Validation
checks them up front, but two registrations racing for the same username
can both pass validation; the index rejects the second INSERT and the
adapter raises DuplicateAccount naming the colliding field, which the
registration workflow reports as an ordinary field error.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateAccount
from src.domain.people import EMAIL_TAKEN, USERNAME_TAKEN, Person

logger = logging.getLogger(__name__)

# Persisted columns, in SELECT order
_COLUMNS = (
    "id",
    "username",
    "password_hash",
    "first_name",
    "last_name",
    "gender",
    "birth_date",
    "email",
    "phone",
    "location",
    "about",
    "account_level",
)
_WRITABLE_COLUMNS = _COLUMNS[1:]
_SELECT_PERSON = f"SELECT {', '.join(_COLUMNS)} FROM people"


class PostgresUserStore:
    """
    Implements UserStore and PersonRepository protocols via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        min_password_length: int = 8,
        bcrypt_rounds: int = 10,
    ) -> None:
        """
        Initialize store with connection pool and account policy.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            min_password_length: Minimum password length for new accounts
            bcrypt_rounds: bcrypt work factor for new passwords
        """
        self._pool = pool
        self._min_password_length = min_password_length
        self._bcrypt_rounds = bcrypt_rounds

    def create(self) -> Person:
        """Instantiate a phantom Person bound to this store."""
        return Person(
            repository=self,
            min_password_length=self._min_password_length,
            bcrypt_rounds=self._bcrypt_rounds,
        )

    def get_by_username(self, username: str) -> Person | None:
        return self._fetch_one(
            f"{_SELECT_PERSON} WHERE lower(username) = lower(%s)", (username,)
        )

    def get_by_email(self, email: str) -> Person | None:
        return self._fetch_one(f"{_SELECT_PERSON} WHERE lower(email) = lower(%s)", (email,))

    def username_taken(self, username: str, exclude_id: int | None = None) -> bool:
        return self._exists("lower(username) = lower(%s)", username, exclude_id)

    def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        return self._exists("lower(email) = lower(%s)", email, exclude_id)

    def insert(self, person: Person) -> int:
        """
        Insert a new person row.

        Returns:
            Generated person ID

        Raises:
            DuplicateAccount: If the username or email index rejects the row
        """
        sql = f"""
            INSERT INTO people ({', '.join(_WRITABLE_COLUMNS)})
            VALUES ({', '.join(['%s'] * len(_WRITABLE_COLUMNS))})
            RETURNING id
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, self._values(person))
                person_id = cursor.fetchone()[0]
                conn.commit()
        except errors.UniqueViolation as e:
            raise _duplicate(e) from None

        return person_id

    def update(self, person: Person) -> None:
        assignments = ", ".join(f"{column} = %s" for column in _WRITABLE_COLUMNS)
        sql = f"UPDATE people SET {assignments} WHERE id = %s"

        try:
            with self._pool.connection() as conn:
                conn.execute(sql, (*self._values(person), person.id))
                conn.commit()
        except errors.UniqueViolation as e:
            raise _duplicate(e) from None

    def _values(self, person: Person) -> tuple[Any, ...]:
        return tuple(getattr(person, column) for column in _WRITABLE_COLUMNS)

    def _exists(self, condition: str, value: str, exclude_id: int | None) -> bool:
        sql = f"SELECT 1 FROM people WHERE {condition} AND id IS DISTINCT FROM %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value, exclude_id))
            return cursor.fetchone() is not None

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> Person | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()

        if row is None:
            return None

        fields = dict(zip(_COLUMNS, row, strict=True))
        if fields["birth_date"] is not None:
            fields["birth_date"] = fields["birth_date"].isoformat()

        return Person(
            repository=self,
            min_password_length=self._min_password_length,
            bcrypt_rounds=self._bcrypt_rounds,
            **fields,
        )


def _duplicate(error: errors.UniqueViolation) -> DuplicateAccount:
    """Map a unique index violation to the registration field it guards."""
    if error.diag.constraint_name == "people_email_key":
        return DuplicateAccount("Email", EMAIL_TAKEN)
    return DuplicateAccount("Username", USERNAME_TAKEN)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
