"""
PostgreSQL token adapter - Implements TokenIssuer protocol.

Stores password reset tokens with an expiry computed from the
configured TTL. Tokens are delivered through the injected notifier.
"""

from datetime import datetime, timedelta, timezone

from psycopg_pool import ConnectionPool

from src.domain.ports import Notifier
from src.domain.tokens import PasswordToken, generate_token_handle


class PostgresTokenIssuer:
    """
    Implements TokenIssuer protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, pool: ConnectionPool, notifier: Notifier, ttl_seconds: int) -> None:
        """
        Args:
            pool: psycopg3 ConnectionPool for database connections
            notifier: Mail delivery used by issued tokens
            ttl_seconds: Lifetime of a new token
        """
        self._pool = pool
        self._notifier = notifier
        self._ttl = timedelta(seconds=ttl_seconds)

    def create(self, creator_id: int, *, single_use: bool = True) -> PasswordToken:
        token = PasswordToken(
            handle=generate_token_handle(),
            creator_id=creator_id,
            expires_at=datetime.now(timezone.utc) + self._ttl,
            notifier=self._notifier,
            single_use=single_use,
        )
        sql = """
            INSERT INTO password_tokens (handle, creator_id, single_use, expires_at)
            VALUES (%s, %s, %s, %s)
        """

        with self._pool.connection() as conn:
            conn.execute(sql, (token.handle, token.creator_id, token.single_use, token.expires_at))
            conn.commit()

        return token
