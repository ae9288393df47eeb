"""
Shared fixtures for adversarial tests.

Provides workflow wiring against a real PostgreSQL database.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserStore
from src.adapters.repository.sessions import PostgresSessionStore
from src.adapters.smtp.console import ConsoleMailer
from src.domain.events import EventBus
from src.domain.registration import RegistrationConfig, RegistrationWorkflow

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def make_pg_workflow(clean_pool: ConnectionPool):
    """Build a RegistrationWorkflow wired to PostgreSQL adapters."""

    def factory(config: RegistrationConfig | None = None) -> RegistrationWorkflow:
        return RegistrationWorkflow(
            store=PostgresUserStore(clean_pool, bcrypt_rounds=4),
            sessions=PostgresSessionStore(clean_pool),
            notifier=ConsoleMailer(),
            events=EventBus(),
            config=config or RegistrationConfig(),
        )

    return factory
