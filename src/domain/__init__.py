"""
Domain layer - Pure business logic with zero framework imports.

This package contains the registration and password recovery workflows.
It defines its own port interfaces for infrastructure abstraction, so
adapters (PostgreSQL, mail, HTTP) stay outside the decision logic.
"""

from .events import BEFORE_REGISTER, RECOVER_PASSWORD_COMPLETE, REGISTER_COMPLETE, EventBus
from .exceptions import AccountNotPersisted, DuplicateAccount, IdentityError
from .people import Person
from .ports import (
    Account,
    Notifier,
    PersonRepository,
    RecoveryToken,
    Rejection,
    SessionState,
    SessionStore,
    TokenIssuer,
    UserStore,
)
from .recovery import RecoveryOutcome, RecoveryWorkflow
from .registration import RegistrationConfig, RegistrationOutcome, RegistrationWorkflow
from .tokens import PasswordToken

__all__ = [
    "BEFORE_REGISTER",
    "RECOVER_PASSWORD_COMPLETE",
    "REGISTER_COMPLETE",
    "Account",
    "AccountNotPersisted",
    "DuplicateAccount",
    "EventBus",
    "IdentityError",
    "Notifier",
    "PasswordToken",
    "Person",
    "PersonRepository",
    "RecoveryOutcome",
    "RecoveryToken",
    "RecoveryWorkflow",
    "RegistrationConfig",
    "RegistrationOutcome",
    "RegistrationWorkflow",
    "Rejection",
    "SessionState",
    "SessionStore",
    "TokenIssuer",
    "UserStore",
]
