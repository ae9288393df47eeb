"""
Recovery workflow - Password reset token issuance.

Looks up the account by username, then by email using the same
identifier, and mails it a single-use reset token. Lookup failures are
reported as a single user-facing message; no token is created for them.
"""

import logging
from dataclasses import dataclass

from .events import RECOVER_PASSWORD_COMPLETE, EventBus
from .exceptions import AccountNotPersisted
from .ports import TokenIssuer, UserStore

logger = logging.getLogger(__name__)

MISSING_IDENTIFIER = (
    "Please provide either your username or email address to reset your password."
)
ACCOUNT_NOT_FOUND = (
    "No account is currently registered for that username or email address."
)
NO_EMAIL_ON_FILE = (
    "Unfortunately, there is no email address on file for this account. "
    "Please contact an administrator."
)


@dataclass
class RecoveryOutcome:
    """Result of one recovery request; ``error`` is None unless it failed."""

    success: bool
    error: str | None = None


@dataclass
class RecoveryWorkflow:
    """Domain service for starting a password reset."""

    store: UserStore
    tokens: TokenIssuer
    events: EventBus

    def request_recovery(self, method: str, identifier: str | None) -> RecoveryOutcome:
        """
        Issue and deliver a recovery token for ``identifier``.

        Args:
            method: HTTP request method; only POST issues a token
            identifier: Username or email address

        Returns:
            RecoveryOutcome; success only when a token was sent
        """
        if method.upper() != "POST":
            return RecoveryOutcome(success=False)

        if not identifier:
            return RecoveryOutcome(success=False, error=MISSING_IDENTIFIER)

        account = self.store.get_by_username(identifier) or self.store.get_by_email(identifier)
        if account is None:
            return RecoveryOutcome(success=False, error=ACCOUNT_NOT_FOUND)

        if not account.email:
            return RecoveryOutcome(success=False, error=NO_EMAIL_ON_FILE)

        if account.id is None:
            raise AccountNotPersisted("Recovery tokens require a saved account")

        token = self.tokens.create(account.id, single_use=True)
        token.send_email(account.email)

        self.events.fire(RECOVER_PASSWORD_COMPLETE, {"account": account})

        logger.info("Issued recovery token for person %s", account.id)
        return RecoveryOutcome(success=True)
