"""End-to-end tests for the invitation HTTP flow.

Runs the FastAPI app against the mocked container (in-memory persistence,
in-process KMS), so no docker services are needed.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from steno.config import Settings
from steno.interface.api.app import create_app
from steno.util.jwt import create_session_token
from tests.conftest import (
    DEBTOR_ACCOUNT_NUMBER,
    DEBTOR_DOB,
    DEBTOR_SSN_LAST_FOUR,
    STRONG_PASSWORD,
    seed_case_and_letter,
)
from tests.di import build_test_container

CORRECT = {"last_four_ssn": DEBTOR_SSN_LAST_FOUR, "date_of_birth": DEBTOR_DOB}
WRONG = {"last_four_ssn": "0000", "date_of_birth": DEBTOR_DOB}


def _staff_headers(organization_id, role: str = "ATTORNEY") -> dict[str, str]:
    token = create_session_token(
        str(uuid4()),
        "staff@firm.example",
        role,
        str(organization_id),
        str(uuid4()),
        datetime.now(timezone.utc) + timedelta(hours=1),
        Settings().auth,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def container():
    return build_test_container(fastapi=True)


@pytest.fixture
def client(container):
    """Create test client."""
    return TestClient(create_app(container))


@pytest.fixture
def seeded(container):
    """A stored case and letter, seeded through the app's own container."""

    async def _seed():
        async with container() as env:
            return await seed_case_and_letter(env)

    return asyncio.run(_seed())


@pytest.fixture
def invitation(client, seeded):
    """Token of a fresh single-use invitation for the seeded letter."""
    _, letter = seeded
    response = client.post(
        f"/letters/{letter.id}/invitation",
        json={},
        headers=_staff_headers(letter.organization_id),
    )
    assert response.status_code == 201
    return response.json()["token"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestStaffRoutes:
    """Staff invitation management."""

    def test_create_invitation(self, client, seeded):
        # Arrange
        _, letter = seeded

        # Act
        response = client.post(
            f"/letters/{letter.id}/invitation",
            json={"expiration_days": 10, "usage_limit": 3},
            headers=_staff_headers(letter.organization_id),
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["usage_limit"] == 3
        assert data["status"] == "active"
        assert data["invitation_url"].endswith(data["token"])

    def test_second_invitation_conflicts(self, client, seeded, invitation):
        _, letter = seeded

        response = client.post(
            f"/letters/{letter.id}/invitation",
            json={},
            headers=_staff_headers(letter.organization_id),
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVITATION_EXISTS"

    def test_other_organization_gets_not_found(self, client, seeded):
        _, letter = seeded

        response = client.post(
            f"/letters/{letter.id}/invitation",
            json={},
            headers=_staff_headers(uuid4()),
        )

        assert response.status_code == 404

    def test_missing_credentials_is_unauthorized(self, client, seeded):
        _, letter = seeded

        response = client.post(f"/letters/{letter.id}/invitation", json={})

        assert response.status_code == 401

    def test_debtor_session_is_forbidden(self, client, seeded):
        _, letter = seeded

        response = client.get(
            f"/letters/{letter.id}/invitation",
            headers=_staff_headers(letter.organization_id, role="DEBTOR"),
        )

        assert response.status_code == 403

    def test_cookie_authentication(self, client, seeded, invitation):
        _, letter = seeded
        token = _staff_headers(letter.organization_id)["Authorization"][7:]
        client.cookies.set("auth_token", token)

        response = client.get(f"/letters/{letter.id}/invitation")

        assert response.status_code == 200
        assert response.json()["token"] == invitation

    def test_revoke_twice(self, client, seeded, invitation):
        _, letter = seeded
        headers = _staff_headers(letter.organization_id)

        first = client.delete(f"/letters/{letter.id}/invitation", headers=headers)
        second = client.delete(f"/letters/{letter.id}/invitation", headers=headers)

        assert first.status_code == 200
        assert first.json()["success"] is True
        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_REVOKED"

        validate = client.get(f"/invitations/{invitation}/validate")
        assert validate.status_code == 400
        assert validate.json()["code"] == "REVOKED"


class TestDebtorFlow:
    """Validate, verify and register through the public routes."""

    def test_full_flow(self, client, seeded, invitation):
        """A debtor opens the link, proves identity and gets an account."""
        # Validate
        response = client.get(f"/invitations/{invitation}/validate")
        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["case_reference"] == "Case: Ja***e v. Acme Lending"
        assert "case_id" not in body

        # Verify
        response = client.post(f"/invitations/{invitation}/verify", json=CORRECT)
        assert response.status_code == 200
        body = response.json()
        assert body["verified"] is True
        assert body["case_preview"]["debtor_first_name"] == "Jane"
        grant = body["verification_token"]

        # Register
        response = client.post(
            f"/invitations/{invitation}/register",
            json={
                "verification_token": grant,
                "email": "Jane.Doe@Example.com",
                "password": STRONG_PASSWORD,
                "accepted_terms": True,
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["role"] == "DEBTOR"
        assert body["email"] == "jane.doe@example.com"
        assert "auth_token" in response.cookies
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

        # The single use is spent
        response = client.get(f"/invitations/{invitation}/validate")
        assert response.json()["code"] == "EXHAUSTED"

    def test_account_number_verification(self, client, invitation):
        response = client.post(
            f"/invitations/{invitation}/verify",
            json={"account_number": DEBTOR_ACCOUNT_NUMBER},
        )

        assert response.status_code == 200

    def test_lockout_after_three_failures(self, client, invitation):
        """Two counted failures, then a 423 carrying the unlock time."""
        first = client.post(f"/invitations/{invitation}/verify", json=WRONG)
        second = client.post(f"/invitations/{invitation}/verify", json=WRONG)
        third = client.post(f"/invitations/{invitation}/verify", json=WRONG)
        fourth = client.post(f"/invitations/{invitation}/verify", json=CORRECT)

        assert first.status_code == 400
        assert first.json()["attempts_remaining"] == 2
        assert second.json()["attempts_remaining"] == 1
        assert third.status_code == 423
        assert "locked_until" in third.json()
        assert fourth.status_code == 423

    def test_grant_replay_is_rejected(self, client, seeded):
        # Arrange
        _, letter = seeded
        created = client.post(
            f"/letters/{letter.id}/invitation",
            json={"usage_limit": 0},
            headers=_staff_headers(letter.organization_id),
        ).json()
        token = created["token"]
        grant = client.post(f"/invitations/{token}/verify", json=CORRECT).json()[
            "verification_token"
        ]
        registration = {
            "verification_token": grant,
            "email": "jane@example.com",
            "password": STRONG_PASSWORD,
            "accepted_terms": True,
        }
        assert client.post(f"/invitations/{token}/register", json=registration).status_code == 201

        # Act
        response = client.post(
            f"/invitations/{token}/register",
            json={**registration, "email": "mallory@example.com"},
        )

        # Assert
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_VERIFICATION_TOKEN"

    def test_unknown_token(self, client):
        response = client.get("/invitations/not-a-real-token/validate")

        assert response.status_code == 400
        assert response.json()["code"] == "MALFORMED"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"last_four_ssn": "12"},
            {"last_four_ssn": "1234"},
            {"last_four_ssn": "1234", "date_of_birth": "15/03/1985"},
        ],
    )
    def test_invalid_verify_body(self, client, invitation, body):
        response = client.post(f"/invitations/{invitation}/verify", json=body)

        assert response.status_code == 422

    @pytest.mark.parametrize("password", ["short1A", "alllowercase1", "NoDigitsHere"])
    def test_weak_password_is_rejected(self, client, invitation, password):
        response = client.post(
            f"/invitations/{invitation}/register",
            json={
                "verification_token": "x",
                "email": "jane@example.com",
                "password": password,
                "accepted_terms": True,
            },
        )

        assert response.status_code == 422

    def test_terms_not_accepted(self, client, invitation):
        grant = client.post(f"/invitations/{invitation}/verify", json=CORRECT).json()[
            "verification_token"
        ]

        response = client.post(
            f"/invitations/{invitation}/register",
            json={
                "verification_token": grant,
                "email": "jane@example.com",
                "password": STRONG_PASSWORD,
                "accepted_terms": False,
            },
        )

        assert response.status_code == 400
        assert response.json()["code"] == "TERMS_NOT_ACCEPTED"
