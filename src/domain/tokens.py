"""
Password reset tokens - Issued recovery credentials.

Only issuance and delivery live here; redeeming a token is handled
elsewhere.
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime

from .ports import Notifier

TOKEN_TEMPLATE = "passwordToken"


def generate_token_handle() -> str:
    """Generate a URL-safe handle with 256 bits of entropy."""
    return secrets.token_urlsafe(32)


@dataclass
class PasswordToken:
    """
    Single-use credential-reset token bound to one account.

    Uses structural subtyping to satisfy the RecoveryToken protocol.
    """

    handle: str
    creator_id: int
    expires_at: datetime
    notifier: Notifier = field(repr=False, compare=False)
    single_use: bool = True

    def send_email(self, address: str) -> None:
        self.notifier.send_from_template(
            address,
            TOKEN_TEMPLATE,
            {
                "token": self.handle,
                "expires_at": self.expires_at.isoformat(),
            },
        )
