"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the registration and
recovery workflows require from infrastructure, plus the optional
extension hooks a deployment may plug into registration. Adapters
implement these protocols through structural subtyping.
"""

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class Rejection(str, Enum):
    """
    Guard rejections that stop a registration before any field processing.

    Values double as stable machine-readable codes for API clients.
    """

    ALREADY_AUTHENTICATED = "already_authenticated"
    REGISTRATION_DISABLED = "registration_disabled"


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the session attached to the current request.

    ``handle`` is None for an anonymous visitor whose session has not been
    stored yet; ``person_id`` is None until the session is elevated.
    """

    handle: str | None = None
    person_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.person_id is not None


class Account(Protocol):
    """
    Port interface for an in-progress user record.

    An account is a phantom (``id`` is None) until ``save()`` succeeds.
    """

    id: int | None
    email: str | None
    validation_errors: dict[str, str]

    @property
    def min_password_length(self) -> int: ...

    @property
    def email_recipient(self) -> str: ...

    def set_fields(self, fields: Mapping[str, Any]) -> None:
        """Assign submitted values, keyed by registration field name."""
        ...

    def set_clear_password(self, password: str) -> None:
        """Set the pending clear-text credential (hashed before storage)."""
        ...

    def validate(self) -> bool:
        """
        Run the account's own validation rules.

        Returns:
            True if valid; otherwise False with ``validation_errors`` filled
        """
        ...

    def add_validation_errors(self, errors: Mapping[str, str]) -> None:
        """Merge externally accumulated errors into ``validation_errors``."""
        ...

    def save(self) -> None:
        """Persist the account, assigning ``id`` on first save."""
        ...


class UserStore(Protocol):
    """Port interface for person persistence and lookup."""

    def create(self) -> Account:
        """Instantiate a phantom account of the store's default class."""
        ...

    def get_by_username(self, username: str) -> Account | None:
        """Find a persisted account by username (case-insensitive)."""
        ...

    def get_by_email(self, email: str) -> Account | None:
        """Find a persisted account by email address (case-insensitive)."""
        ...


class PersonRepository(Protocol):
    """Port interface used by the default ``Person`` account for persistence."""

    def username_taken(self, username: str, exclude_id: int | None = None) -> bool:
        """Whether another person already holds ``username``."""
        ...

    def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Whether another person already holds ``email``."""
        ...

    def insert(self, person: Any) -> int:
        """
        Insert a new person row.

        Returns:
            The generated person ID

        Raises:
            DuplicateAccount: If a concurrent insert claimed the username or email
        """
        ...

    def update(self, person: Any) -> None:
        """Write back an already persisted person."""
        ...


class SessionStore(Protocol):
    """Port interface for session persistence."""

    def elevate(self, session: SessionState, person_id: int) -> SessionState:
        """
        Bind a session to a person identity, logging the visitor in.

        Args:
            session: Current session (possibly anonymous and unstored)
            person_id: Identity of a persisted account

        Returns:
            The elevated session, carrying a stored handle
        """
        ...


class Notifier(Protocol):
    """Port interface for templated email delivery."""

    def send_from_template(
        self, recipient: str, template: str, context: Mapping[str, Any]
    ) -> None:
        """
        Render ``template`` with ``context`` and deliver it to ``recipient``.

        Args:
            recipient: Address, optionally with display name
            template: Template name, e.g. ``registerComplete``
            context: Values exposed to the template
        """
        ...


class RecoveryToken(Protocol):
    """Port interface for an issued single-use password reset token."""

    handle: str
    creator_id: int
    expires_at: datetime
    single_use: bool

    def send_email(self, address: str) -> None:
        """Deliver the token to ``address``."""
        ...


class TokenIssuer(Protocol):
    """Port interface for password reset token creation."""

    def create(self, creator_id: int, *, single_use: bool = True) -> RecoveryToken:
        """
        Create and store a new recovery token bound to ``creator_id``.

        Args:
            creator_id: Identity of the account the token resets
            single_use: Whether the token is invalidated on redemption
        """
        ...


class AccountFactory(Protocol):
    """
    Hook constructing the account for a registration request.

    Runs on every request, before any field assignment. May mutate
    ``submission`` (e.g. to supply dynamic defaults) and append to ``errors``.
    """

    def __call__(
        self, submission: MutableMapping[str, str], errors: MutableMapping[str, str]
    ) -> Account: ...


class RegistrationDataHook(Protocol):
    """
    Hook applying extra submission data to the account.

    Runs on submissions only, after base field and password assignment and
    before validation. Reports problems by appending to ``errors``.
    """

    def __call__(
        self,
        account: Account,
        submission: Mapping[str, str],
        errors: MutableMapping[str, str],
    ) -> None: ...


class RegistrationCompleteHook(Protocol):
    """Hook invoked after a registration has been persisted and announced."""

    def __call__(self, account: Account, submission: Mapping[str, str]) -> None: ...
