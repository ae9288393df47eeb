"""
Domain exceptions - Semantic error types for collaborator faults.

Predictable business-rule failures (guard rejections, field errors, failed
lookups) are returned as outcome records and never raised. The exceptions
here cover faults the workflows cannot recover from and let propagate,
except DuplicateAccount, which registration turns back into a field error.
"""


class IdentityError(Exception):
    """Base class for identity domain errors."""

    pass


class DuplicateAccount(IdentityError):
    """
    Username or email was claimed by a concurrent registration.

    ``field`` names the registration field that collided and ``message``
    is the user-facing text for it.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class AccountNotPersisted(IdentityError):
    """Operation requires an account that has been saved."""

    pass
