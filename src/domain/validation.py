"""
Submission helpers - Field filtering and password policy.

Shared by the registration workflow; each helper either derives a value
from raw request data or records messages into an error accumulator.
"""

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

DEFAULT_REGISTRATION_FIELDS: tuple[str, ...] = (
    "FirstName",
    "LastName",
    "Gender",
    "BirthDate",
    "Username",
    "Password",
    "Email",
    "Phone",
    "Location",
    "About",
)

PASSWORD_CONFIRM_FIELD = "PasswordConfirm"


def filter_registration_fields(
    raw_fields: Mapping[str, Any], allowed: Iterable[str]
) -> dict[str, Any]:
    """
    Intersect raw request data with the registration allow-list.

    Keys outside the allow-list are dropped; allowed keys missing from the
    request stay absent. Values pass through unchanged.
    """
    allowed = set(allowed)
    return {name: value for name, value in raw_fields.items() if name in allowed}


def check_password_policy(
    password: str | None,
    confirmation: str | None,
    min_length: int,
    errors: MutableMapping[str, str],
) -> None:
    """
    Record at most one password error into ``errors``.

    Length is checked first; confirmation is only compared once the
    password is long enough, so a short password masks a mismatch.
    """
    if not password or len(password) < min_length:
        errors["Password"] = f"Password must be at least {min_length} characters long."
    elif not confirmation or password != confirmation:
        errors[PASSWORD_CONFIRM_FIELD] = (
            "Please enter your password a second time for confirmation."
        )
