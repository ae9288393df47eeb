"""
Integration tests for registration and recovery flows.

Tests the full flows through the API with a real database.
Skipped when PostgreSQL is not running.
"""

import logging
import re

import pytest
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool

from src.api.main import app

pytestmark = pytest.mark.integration

VALID = {
    "Username": "jdoe",
    "Password": "longenough1",
    "PasswordConfirm": "longenough1",
    "Email": "a@b.com",
}


@pytest.fixture
def client(clean_pool: ConnectionPool) -> TestClient:
    """Create test client with real database connection."""
    app.state.pool = clean_pool
    return TestClient(app)


def count_people(pool: ConnectionPool) -> int:
    with pool.connection() as conn:
        return conn.execute("SELECT COUNT(*) FROM people").fetchone()[0]


class TestRegisterFlow:
    """Integration tests for /v1/register."""

    def test_form_display(self, client: TestClient, clean_pool: ConnectionPool) -> None:
        response = client.get("/v1/register")

        assert response.status_code == 200
        assert response.json()["data"]["id"] is None
        assert count_people(clean_pool) == 0

    def test_happy_path(
        self,
        client: TestClient,
        clean_pool: ConnectionPool,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Account is stored, session bound and welcome mail sent."""
        with caplog.at_level(logging.INFO):
            response = client.post("/v1/register", json=VALID)

        assert response.status_code == 201
        person_id = response.json()["data"]["id"]
        handle = response.cookies.get("s")
        assert handle

        with clean_pool.connection() as conn:
            username = conn.execute(
                "SELECT username FROM people WHERE id = %s", (person_id,)
            ).fetchone()[0]
            session_person = conn.execute(
                "SELECT person_id FROM sessions WHERE handle = %s", (handle,)
            ).fetchone()[0]

        assert username == "jdoe"
        assert session_person == person_id
        assert "[MAIL] To: a@b.com Template: registerComplete" in caplog.text

    def test_logged_in_session_cannot_register_again(self, client: TestClient) -> None:
        first = client.post("/v1/register", json=VALID)
        assert first.status_code == 201

        second = client.post(
            "/v1/register",
            json={**VALID, "Username": "other", "Email": "other@b.com"},
        )

        assert second.status_code == 403

    def test_short_password(self, client: TestClient, clean_pool: ConnectionPool) -> None:
        response = client.post(
            "/v1/register", json={**VALID, "Password": "abc", "PasswordConfirm": "abc"}
        )

        assert response.status_code == 422
        assert set(response.json()["errors"]) == {"Password"}
        assert "s" not in response.cookies
        assert count_people(clean_pool) == 0

    def test_taken_username(self, client: TestClient, clean_pool: ConnectionPool) -> None:
        assert client.post("/v1/register", json=VALID).status_code == 201
        client.cookies.clear()

        response = client.post("/v1/register", json={**VALID, "Email": "new@b.com"})

        assert response.status_code == 422
        assert "Username" in response.json()["errors"]
        assert count_people(clean_pool) == 1


class TestRecoverFlow:
    """Integration tests for /v1/register/recover."""

    def test_recover_by_email(
        self,
        client: TestClient,
        clean_pool: ConnectionPool,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        client.post("/v1/register", json=VALID)

        with caplog.at_level(logging.INFO):
            response = client.post("/v1/register/recover", json={"username": "A@B.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "error": None}

        match = re.search(r"\[MAIL\] Token: (\S+)", caplog.text)
        assert match
        with clean_pool.connection() as conn:
            count = conn.execute(
                "SELECT COUNT(*) FROM password_tokens WHERE handle = %s", (match.group(1),)
            ).fetchone()[0]
        assert count == 1

    def test_recover_without_email(
        self, client: TestClient, clean_pool: ConnectionPool
    ) -> None:
        client.post("/v1/register", json={k: v for k, v in VALID.items() if k != "Email"})

        response = client.post("/v1/register/recover", json={"username": "jdoe"})

        assert response.status_code == 400
        assert "no email address on file" in response.json()["error"]
        with clean_pool.connection() as conn:
            assert conn.execute("SELECT COUNT(*) FROM password_tokens").fetchone()[0] == 0

    def test_recover_unknown(self, client: TestClient) -> None:
        response = client.post("/v1/register/recover", json={"username": "nobody"})

        assert response.status_code == 400
        assert "No account" in response.json()["error"]
