"""Repository adapters - Database implementations."""

from .postgres import PostgresUserStore, run_migrations
from .sessions import PostgresSessionStore
from .tokens import PostgresTokenIssuer

__all__ = ["PostgresSessionStore", "PostgresTokenIssuer", "PostgresUserStore", "run_migrations"]
