"""
Registration workflow - Self-service account creation.

This module contains the decision logic for registering a new account.

Request Flow
============

Guards (checked first, each ends the request with a rejection):
- Session already authenticated -> ALREADY_AUTHENTICATED
- Registration disabled         -> REGISTRATION_DISABLED

Every request:
    filter fields -> construct account (create_user hook or store default)

Display request (any method but POST):
    apply override fields to the phantom -> return it for the form

Submission (POST):
    assign fields -> set password -> password policy
    -> apply_registration_data hook -> beforeRegister event
    -> decide: account.validate() AND no accumulated errors

    success: save -> elevate session -> welcome email
             -> on_register_complete hook -> registerComplete event
    failure: merge accumulated errors into the account, return it unsaved

A save that collides with a concurrent registration (DuplicateAccount) is
reported as an error on the colliding field through the failure path.

Note: saving and elevating the session are separate calls on separate
stores. If elevation fails after the save, the account exists without a
logged-in session; there is no compensating action.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .events import BEFORE_REGISTER, REGISTER_COMPLETE, EventBus
from .exceptions import DuplicateAccount
from .ports import (
    Account,
    AccountFactory,
    Notifier,
    RegistrationCompleteHook,
    RegistrationDataHook,
    Rejection,
    SessionState,
    SessionStore,
    UserStore,
)
from .validation import (
    DEFAULT_REGISTRATION_FIELDS,
    PASSWORD_CONFIRM_FIELD,
    check_password_policy,
    filter_registration_fields,
)

logger = logging.getLogger(__name__)

WELCOME_TEMPLATE = "registerComplete"

REJECTION_MESSAGES = {
    Rejection.ALREADY_AUTHENTICATED: (
        "You are already logged in. Please log out if you need to register a new account."
    ),
    Rejection.REGISTRATION_DISABLED: (
        "Sorry, self-registration is not currently available. Please contact an administrator."
    ),
}


@dataclass(frozen=True)
class RegistrationConfig:
    """
    Deployment configuration for self-registration.

    Hooks are optional; each is invoked only when set.
    """

    enable_registration: bool = True
    registration_fields: tuple[str, ...] = DEFAULT_REGISTRATION_FIELDS
    create_user: AccountFactory | None = None
    apply_registration_data: RegistrationDataHook | None = None
    on_register_complete: RegistrationCompleteHook | None = None


@dataclass
class RegistrationOutcome:
    """
    Result of one registration request.

    ``account`` is None only for guard rejections. ``session`` is the
    elevated session on success, otherwise the session that came in.
    """

    success: bool
    account: Account | None = None
    errors: dict[str, str] = field(default_factory=dict)
    session: SessionState | None = None
    rejection: Rejection | None = None

    @property
    def message(self) -> str | None:
        if self.rejection is None:
            return None
        return REJECTION_MESSAGES[self.rejection]


@dataclass
class RegistrationWorkflow:
    """
    Domain service for self-service registration.

    Orchestrates field intake, extension hooks, validation and the
    success side effects in a fixed order.
    """

    store: UserStore
    sessions: SessionStore
    notifier: Notifier
    events: EventBus
    config: RegistrationConfig = field(default_factory=RegistrationConfig)

    def register(
        self,
        method: str,
        raw_fields: Mapping[str, str],
        session: SessionState,
        override_fields: Mapping[str, Any] | None = None,
    ) -> RegistrationOutcome:
        """
        Handle a registration form display or submission.

        Args:
            method: HTTP request method; only POST submits
            raw_fields: Raw request data, unfiltered
            session: Session attached to the request
            override_fields: Values forced onto the account, winning over input

        Returns:
            RegistrationOutcome describing success, rejection or the
            account to re-display with its errors
        """
        if session.is_authenticated:
            logger.warning("Registration refused: session already authenticated")
            return self._reject(Rejection.ALREADY_AUTHENTICATED, session)

        if not self.config.enable_registration:
            logger.warning("Registration refused: self-registration disabled")
            return self._reject(Rejection.REGISTRATION_DISABLED, session)

        override_fields = dict(override_fields or {})
        submission = filter_registration_fields(raw_fields, self.config.registration_fields)
        errors: dict[str, str] = {}

        if self.config.create_user is not None:
            account = self.config.create_user(submission, errors)
        else:
            account = self.store.create()

        if method.upper() != "POST":
            account.set_fields(override_fields)
            return RegistrationOutcome(success=False, account=account, session=session)

        account.set_fields({**submission, **override_fields})

        password = submission.get("Password")
        if password:
            account.set_clear_password(password)

        check_password_policy(
            password,
            raw_fields.get(PASSWORD_CONFIRM_FIELD),
            account.min_password_length,
            errors,
        )

        if self.config.apply_registration_data is not None:
            self.config.apply_registration_data(account, dict(submission), errors)

        self.events.fire(
            BEFORE_REGISTER,
            {"account": account, "request_data": dict(raw_fields), "errors": errors},
        )

        if account.validate() and not errors:
            try:
                account.save()
            except DuplicateAccount as e:
                logger.info("Registration lost a race for %s", e.field)
                errors[e.field] = e.message
            else:
                return self._complete(account, submission, raw_fields, session)

        if errors:
            account.add_validation_errors(errors)

        return RegistrationOutcome(
            success=False,
            account=account,
            errors=dict(account.validation_errors),
            session=session,
        )

    def _complete(
        self,
        account: Account,
        submission: dict[str, Any],
        raw_fields: Mapping[str, Any],
        session: SessionState,
    ) -> RegistrationOutcome:
        elevated = self.sessions.elevate(session, account.id)

        self.notifier.send_from_template(
            account.email_recipient,
            WELCOME_TEMPLATE,
            {"account": account, "registration_data": submission},
        )

        if self.config.on_register_complete is not None:
            self.config.on_register_complete(account, submission)

        self.events.fire(
            REGISTER_COMPLETE, {"account": account, "request_data": dict(raw_fields)}
        )

        logger.info("Registered person %s", account.id)
        return RegistrationOutcome(success=True, account=account, session=elevated)

    def _reject(self, rejection: Rejection, session: SessionState) -> RegistrationOutcome:
        return RegistrationOutcome(success=False, session=session, rejection=rejection)
