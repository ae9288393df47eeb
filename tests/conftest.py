"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Mocked stores, notifier and session store for workflow tests
- A Person factory backed by a mocked repository
- A PostgreSQL pool for integration tests (skipped when unreachable)
"""

from unittest.mock import Mock

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings
from src.domain.events import EventBus
from src.domain.people import Person
from src.domain.ports import SessionState
from src.domain.registration import RegistrationConfig, RegistrationWorkflow

NEW_PERSON_ID = 42


@pytest.fixture
def repository() -> Mock:
    """Person repository with no existing accounts."""
    repo = Mock()
    repo.username_taken.return_value = False
    repo.email_taken.return_value = False
    repo.insert.return_value = NEW_PERSON_ID
    return repo


@pytest.fixture
def store(repository: Mock) -> Mock:
    """User store creating real Person phantoms (fast bcrypt rounds)."""
    user_store = Mock()
    user_store.create.side_effect = lambda: Person(
        repository=repository, min_password_length=8, bcrypt_rounds=4
    )
    return user_store


@pytest.fixture
def sessions() -> Mock:
    session_store = Mock()
    session_store.elevate.side_effect = lambda session, person_id: SessionState(
        handle="elevated-handle", person_id=person_id
    )
    return session_store


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def anonymous() -> SessionState:
    return SessionState()


@pytest.fixture
def make_workflow(store: Mock, sessions: Mock, notifier: Mock, events: EventBus):
    """Build a RegistrationWorkflow, optionally with custom config."""

    def factory(**config_kwargs) -> RegistrationWorkflow:
        return RegistrationWorkflow(
            store=store,
            sessions=sessions,
            notifier=notifier,
            events=events,
            config=RegistrationConfig(**config_kwargs),
        )

    return factory


@pytest.fixture(scope="session")
def pg_pool():
    """
    Connection pool for integration tests, with migrations applied.

    Skips dependent tests when PostgreSQL is unreachable.
    """
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=False)
    try:
        pool.open(wait=True, timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not available")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_pool(pg_pool):
    """Empty all tables before each test."""
    with pg_pool.connection() as conn:
        conn.execute("TRUNCATE people, sessions, password_tokens RESTART IDENTITY CASCADE")
        conn.commit()
    return pg_pool
