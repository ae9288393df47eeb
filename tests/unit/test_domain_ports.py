"""
Unit tests for domain ports and exceptions.

Tests verify:
- Port interfaces are properly defined
- Exceptions are properly structured
- Domain purity (zero framework imports)
"""

import json
import subprocess
from enum import Enum

import pytest

from src.domain.exceptions import AccountNotPersisted, DuplicateAccount, IdentityError
from src.domain.ports import (
    Account,
    Notifier,
    Rejection,
    SessionState,
    SessionStore,
    TokenIssuer,
    UserStore,
)


class TestRejectionEnum:
    """Tests for the Rejection enum."""

    def test_rejection_is_str_enum(self) -> None:
        assert issubclass(Rejection, Enum)
        assert issubclass(Rejection, str)

    def test_rejection_values(self) -> None:
        assert Rejection.ALREADY_AUTHENTICATED.value == "already_authenticated"
        assert Rejection.REGISTRATION_DISABLED.value == "registration_disabled"

    def test_rejection_json_serializable(self) -> None:
        assert json.dumps(Rejection.REGISTRATION_DISABLED) == '"registration_disabled"'


class TestSessionState:
    """Tests for SessionState."""

    def test_default_is_anonymous(self) -> None:
        session = SessionState()

        assert session.handle is None
        assert session.is_authenticated is False

    def test_stored_anonymous_session(self) -> None:
        assert SessionState(handle="abc").is_authenticated is False

    def test_authenticated_session(self) -> None:
        assert SessionState(handle="abc", person_id=1).is_authenticated is True

    def test_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            SessionState().person_id = 5  # type: ignore[misc]


class TestProtocols:
    """Tests for port protocol definitions."""

    def test_account_protocol_methods(self) -> None:
        for name in (
            "set_fields",
            "set_clear_password",
            "validate",
            "add_validation_errors",
            "save",
            "min_password_length",
            "email_recipient",
        ):
            assert hasattr(Account, name)

    def test_user_store_protocol_methods(self) -> None:
        for name in ("create", "get_by_username", "get_by_email"):
            assert hasattr(UserStore, name)

    def test_other_ports(self) -> None:
        assert hasattr(SessionStore, "elevate")
        assert hasattr(Notifier, "send_from_template")
        assert hasattr(TokenIssuer, "create")


class TestDomainExceptions:
    """Tests for domain exceptions."""

    def test_hierarchy(self) -> None:
        assert issubclass(IdentityError, Exception)
        assert issubclass(DuplicateAccount, IdentityError)
        assert issubclass(AccountNotPersisted, IdentityError)

    def test_duplicate_account_names_field(self) -> None:
        error = DuplicateAccount("Username", "That username is already registered.")

        assert error.field == "Username"
        assert error.message == "That username is already registered."
        assert str(error) == "That username is already registered."


class TestDomainPurity:
    """Tests for domain purity - zero framework imports."""

    @pytest.mark.parametrize(
        "pattern",
        [
            "from fastapi",
            "import fastapi",
            "from pydantic",
            "import pydantic",
            "from psycopg",
            "import psycopg",
        ],
    )
    def test_no_framework_imports_in_domain(self, pattern: str) -> None:
        result = subprocess.run(
            ["grep", "-r", pattern, "src/domain/"],
            capture_output=True,
            text=True,
        )
        assert result.returncode != 0, f"Framework import found: {result.stdout}"
