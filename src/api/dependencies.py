"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain workflows and infrastructure adapters into routes.
"""

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserStore
from src.adapters.repository.sessions import PostgresSessionStore
from src.adapters.repository.tokens import PostgresTokenIssuer
from src.adapters.smtp.console import ConsoleMailer
from src.config.settings import Settings, get_settings
from src.domain.events import EventBus
from src.domain.ports import SessionState
from src.domain.recovery import RecoveryWorkflow
from src.domain.registration import RegistrationConfig, RegistrationWorkflow

# Module-level singleton - ConsoleMailer is stateless
_mailer = ConsoleMailer()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_event_bus(request: Request) -> EventBus:
    """Get the application's event bus, where listeners are subscribed at startup."""
    return request.app.state.events


def get_mailer() -> ConsoleMailer:
    """Get console mailer (singleton)."""
    return _mailer


def get_user_store(
    request: Request, settings: Settings = Depends(get_settings)
) -> PostgresUserStore:
    """Create user store with connection pool and password policy."""
    return PostgresUserStore(
        get_pool(request),
        min_password_length=settings.min_password_length,
        bcrypt_rounds=settings.bcrypt_cost,
    )


def get_session_store(request: Request) -> PostgresSessionStore:
    return PostgresSessionStore(get_pool(request))


def get_session_state(
    request: Request,
    settings: Settings = Depends(get_settings),
    sessions: PostgresSessionStore = Depends(get_session_store),
) -> SessionState:
    """Load the session named by the request's session cookie."""
    return sessions.load(request.cookies.get(settings.session_cookie_name))


def get_registration_config(
    request: Request, settings: Settings = Depends(get_settings)
) -> RegistrationConfig:
    """
    Build registration config from settings.

    Hooks installed on ``app.state.registration_hooks`` (a dict of
    RegistrationConfig field names) are passed through.
    """
    hooks = getattr(request.app.state, "registration_hooks", {})
    return RegistrationConfig(
        enable_registration=settings.enable_registration,
        registration_fields=tuple(settings.registration_fields),
        **hooks,
    )


def get_registration_workflow(
    request: Request,
    config: RegistrationConfig = Depends(get_registration_config),
    store: PostgresUserStore = Depends(get_user_store),
    sessions: PostgresSessionStore = Depends(get_session_store),
) -> RegistrationWorkflow:
    """
    Create registration workflow with injected dependencies.

    Wires together the stores, mailer and event bus for the domain service.
    """
    return RegistrationWorkflow(
        store=store,
        sessions=sessions,
        notifier=get_mailer(),
        events=get_event_bus(request),
        config=config,
    )


def get_recovery_workflow(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: PostgresUserStore = Depends(get_user_store),
) -> RecoveryWorkflow:
    """Create recovery workflow with injected dependencies."""
    tokens = PostgresTokenIssuer(
        get_pool(request), get_mailer(), settings.recovery_token_ttl_seconds
    )
    return RecoveryWorkflow(store=store, tokens=tokens, events=get_event_bus(request))
