"""End-to-end tests for the registration API."""

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from yam.adapter.supabase import MockIdentityProviderFactory
from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
    ProfileRepository,
)
from yam.domain.service import IdentityProviderFactory
from yam.domain.value import InvitationStatus, ProfileStatus
from yam.interface.api.app import create_app
from tests.conftest import (
    make_invitation,
    make_mailroom,
    make_organization,
    make_profile,
    make_session,
)
from tests.di import build_test_container

LINK = "https://app.useyam.com/register?token=abc"


@pytest_asyncio.fixture
async def container():
    container = build_test_container()
    yield container
    await container.close()


@pytest_asyncio.fixture
async def client(container):
    """Async client sharing the test's event loop with the app."""
    app = create_app(container)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def seed_invitation(container, email="alice@example.com"):
    organization = make_organization()
    mailroom = make_mailroom(organization.id)
    await (await container.get(OrganizationRepository)).save(organization)
    await (await container.get(MailroomRepository)).save(mailroom)
    invitation = make_invitation(
        token="abc",
        email=email,
        organization_id=organization.id,
        mailroom_id=mailroom.id,
    )
    await (await container.get(InvitationRepository)).save(invitation)
    return invitation


async def sign_in(container, credential="user-jwt", email="alice@example.com"):
    session = make_session(email=email, access_token=credential)
    identities: MockIdentityProviderFactory = await container.get(
        IdentityProviderFactory
    )
    identities.register(credential, session)
    return session


class TestRegistrationFlow:
    """Opening an invitation link and activating the account."""

    @pytest.mark.asyncio
    async def test_full_redemption(self, client, container):
        invitation = await seed_invitation(container)
        session = await sign_in(container)
        await (await container.get(ProfileRepository)).save(
            make_profile(session.user_id)
        )

        response = await client.post(
            "/registrations",
            json={"url": LINK},
            headers={"Authorization": "Bearer user-jwt"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "ready_for_password"
        assert data["invitation"]["organization_name"] == "Tufts University"
        assert data["invitation"]["mailroom_name"] == "Carmichael Hall"
        assert data["is_terminal"] is False
        flow_id = data["flow_id"]

        response = await client.post(
            f"/registrations/{flow_id}/password",
            json={"password": "correct-horse", "confirm_password": "correct-horse"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "redirected"
        assert data["redirect_path"] == "/tufts/carmichael/"

        stored = await (await container.get(InvitationRepository)).find_by_id(
            invitation.id
        )
        assert stored.status == InvitationStatus.RESOLVED
        profile = await (await container.get(ProfileRepository)).find_by_id(
            session.user_id
        )
        assert profile.status == ProfileStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_access_token_in_body(self, client, container):
        await seed_invitation(container)
        await sign_in(container, credential="body-jwt")

        response = await client.post(
            "/registrations", json={"url": LINK, "access_token": "body-jwt"}
        )

        assert response.json()["status"] == "ready_for_password"

    @pytest.mark.asyncio
    async def test_credential_from_link_fragment(self, client, container):
        await seed_invitation(container)
        await sign_in(container, credential="link-jwt")

        response = await client.post(
            "/registrations",
            json={"url": f"{LINK}#access_token=link-jwt&type=invite"},
        )

        assert response.json()["status"] == "ready_for_password"

    @pytest.mark.asyncio
    async def test_link_without_token(self, client):
        response = await client.post(
            "/registrations", json={"url": "https://app.useyam.com/register"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "invalid_invite"
        assert data["error_code"] == "token_missing"
        assert data["message"] == "Invalid invitation link: No token found."
        assert data["action"] == "/login"

    @pytest.mark.asyncio
    async def test_wrong_account(self, client, container):
        await seed_invitation(container, email="alice@example.com")
        await sign_in(container, email="mallory@example.com")

        response = await client.post(
            "/registrations",
            json={"url": LINK},
            headers={"Authorization": "Bearer user-jwt"},
        )

        data = response.json()
        assert data["status"] == "invalid_invite"
        assert data["error_code"] == "email_mismatch"
        assert data["is_terminal"] is True

    @pytest.mark.asyncio
    async def test_get_and_close(self, client, container):
        await seed_invitation(container)
        await sign_in(container)
        started = (
            await client.post(
                "/registrations",
                json={"url": LINK},
                headers={"Authorization": "Bearer user-jwt"},
            )
        ).json()
        flow_id = started["flow_id"]

        response = await client.get(f"/registrations/{flow_id}")
        assert response.status_code == 200
        assert response.json() == started

        response = await client.delete(f"/registrations/{flow_id}")
        assert response.status_code == 200

        response = await client.get(f"/registrations/{flow_id}")
        assert response.status_code == 404


    @pytest.mark.asyncio
    async def test_sign_out_ends_flow(self, client, container):
        await seed_invitation(container)
        await sign_in(container)
        flow_id = (
            await client.post(
                "/registrations",
                json={"url": LINK},
                headers={"Authorization": "Bearer user-jwt"},
            )
        ).json()["flow_id"]

        response = await client.post(f"/registrations/{flow_id}/sign-out")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "invalid_invite"
        assert data["error_code"] == "session_ended"
        assert data["is_terminal"] is True
        assert data["action"] == "/login"

        response = await client.post(
            f"/registrations/{flow_id}/password",
            json={"password": "correct-horse", "confirm_password": "correct-horse"},
        )
        assert response.json()["status"] == "invalid_invite"


class TestRequestErrors:
    """Unknown flows and invalid bodies."""

    @pytest.mark.asyncio
    async def test_unknown_flow(self, client):
        assert (await client.get("/registrations/nope")).status_code == 404
        assert (await client.delete("/registrations/nope")).status_code == 404
        response = await client.post(
            "/registrations/nope/password",
            json={"password": "correct-horse", "confirm_password": "correct-horse"},
        )
        assert response.status_code == 404
        assert (await client.post("/registrations/nope/sign-out")).status_code == 404

    @pytest.mark.parametrize(
        "body",
        [
            {"password": "short", "confirm_password": "short"},
            {"password": "correct-horse", "confirm_password": "battery-staple"},
            {"password": "correct-horse"},
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_password_body(self, client, body):
        response = await client.post("/registrations/any/password", json=body)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_missing_url(self, client):
        response = await client.post("/registrations", json={})

        assert response.status_code == 422


class TestConfirmSignup:
    """Signup confirmation endpoint."""

    @pytest.fixture
    def sync_client(self):
        return TestClient(create_app(build_test_container()))

    def test_builds_confirmation_url(self, sync_client):
        response = sync_client.post(
            "/confirm-signup", json={"token": "otp-123", "email": "alice@example.com"}
        )

        assert response.status_code == 200
        url = response.json()["confirmation_url"]
        assert "/auth/v1/verify?" in url
        assert "token=otp-123" in url
        assert "type=invite" in url

    def test_invalid_email(self, sync_client):
        response = sync_client.post(
            "/confirm-signup", json={"token": "otp-123", "email": "not-an-email"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Please enter a valid email address."

    def test_missing_token(self, sync_client):
        response = sync_client.post(
            "/confirm-signup", json={"email": "alice@example.com"}
        )

        assert response.status_code == 400


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_counts_flows(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["active_flows"] == 0

        await client.post(
            "/registrations", json={"url": "https://app.useyam.com/register"}
        )

        assert (await client.get("/health")).json()["active_flows"] == 1
