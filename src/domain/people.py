"""
Person entity - Default account class for self-registration.

A ``Person`` is created as a phantom by the user store, receives submitted
fields by their registration names, validates itself (including uniqueness
checks through its repository) and persists through the same repository.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import bcrypt

from .ports import PersonRepository

logger = logging.getLogger(__name__)

# Registration field name -> attribute. Password is handled separately.
FIELD_ATTRIBUTES = {
    "FirstName": "first_name",
    "LastName": "last_name",
    "Gender": "gender",
    "BirthDate": "birth_date",
    "Username": "username",
    "Email": "email",
    "Phone": "phone",
    "Location": "location",
    "About": "about",
    "AccountLevel": "account_level",
}

GENDERS = ("Male", "Female")

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{2,30}$")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USERNAME_TAKEN = "That username is already registered."
EMAIL_TAKEN = "That email address is already registered."


@dataclass(eq=False)
class Person:
    """
    Registrable person record.

    Uses structural subtyping to satisfy the Account protocol.
    """

    repository: PersonRepository = field(repr=False)
    min_password_length: int = 8
    bcrypt_rounds: int = field(default=10, repr=False)

    id: int | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    birth_date: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    about: str | None = None
    account_level: str = "User"
    password_hash: str | None = field(default=None, repr=False)
    validation_errors: dict[str, str] = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def email_recipient(self) -> str:
        """Address formatted with the display name when both are known."""
        if self.email and self.full_name:
            return f"{self.full_name} <{self.email}>"
        return self.email or ""

    def set_fields(self, fields: Mapping[str, Any]) -> None:
        for name, value in fields.items():
            attribute = FIELD_ATTRIBUTES.get(name)
            if attribute is None:
                if name != "Password":
                    logger.debug("Ignoring unknown person field %s", name)
                continue
            if isinstance(value, str):
                value = value.strip() or None
            setattr(self, attribute, value)

    def set_clear_password(self, password: str) -> None:
        """Hash ``password`` with bcrypt; the clear text is not retained."""
        self.password_hash = bcrypt.hashpw(
            password.encode(), bcrypt.gensalt(rounds=self.bcrypt_rounds)
        ).decode()

    def validate(self) -> bool:
        """
        Check required fields, formats and uniqueness.

        Replaces any previous ``validation_errors``.
        """
        errors: dict[str, str] = {}

        if not self.username:
            errors["Username"] = "Please choose a username."
        elif not _USERNAME_PATTERN.match(self.username):
            errors["Username"] = (
                "Username must be 2-30 characters of letters, numbers, "
                "periods, dashes or underscores."
            )
        elif self.repository.username_taken(self.username, exclude_id=self.id):
            errors["Username"] = USERNAME_TAKEN

        if self.email:
            if not _EMAIL_PATTERN.match(self.email):
                errors["Email"] = "Please provide a valid email address."
            elif self.repository.email_taken(self.email, exclude_id=self.id):
                errors["Email"] = EMAIL_TAKEN

        if self.birth_date:
            try:
                date.fromisoformat(self.birth_date)
            except ValueError:
                errors["BirthDate"] = "Birth date must be formatted as YYYY-MM-DD."

        if self.gender and self.gender not in GENDERS:
            errors["Gender"] = "Gender must be Male or Female."

        self.validation_errors = errors
        return not errors

    def add_validation_errors(self, errors: Mapping[str, str]) -> None:
        self.validation_errors.update(errors)

    def save(self) -> None:
        if self.id is None:
            self.id = self.repository.insert(self)
        else:
            self.repository.update(self)
