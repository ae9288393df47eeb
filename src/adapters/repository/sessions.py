"""
PostgreSQL session adapter - Implements SessionStore protocol.

Sessions are rows keyed by an opaque handle carried in a cookie. An
anonymous visitor has no row until the session is first elevated.
"""

import logging
import secrets

from psycopg_pool import ConnectionPool

from src.domain.ports import SessionState

logger = logging.getLogger(__name__)


class PostgresSessionStore:
    """
    Implements SessionStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def load(self, handle: str | None) -> SessionState:
        """
        Load the session for a cookie handle.

        Unknown or missing handles yield an anonymous, unstored session.
        """
        if not handle:
            return SessionState()

        sql = """
            UPDATE sessions SET last_request = NOW()
            WHERE handle = %s
            RETURNING person_id
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (handle,))
            row = cursor.fetchone()
            conn.commit()

        if row is None:
            return SessionState()
        return SessionState(handle=handle, person_id=row[0])

    def elevate(self, session: SessionState, person_id: int) -> SessionState:
        """
        Bind the session to ``person_id``, storing it if it is new.

        Uses INSERT ... ON CONFLICT so a stored anonymous session keeps
        its handle.
        """
        handle = session.handle or secrets.token_urlsafe(32)
        sql = """
            INSERT INTO sessions (handle, person_id)
            VALUES (%s, %s)
            ON CONFLICT (handle) DO UPDATE
            SET person_id = EXCLUDED.person_id,
                last_request = NOW()
        """

        with self._pool.connection() as conn:
            conn.execute(sql, (handle, person_id))
            conn.commit()

        logger.info("Session elevated for person %s", person_id)
        return SessionState(handle=handle, person_id=person_id)
