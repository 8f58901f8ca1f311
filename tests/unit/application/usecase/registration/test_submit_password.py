"""Tests for submit password use case."""

import pytest
from pydantic import ValidationError

from yam.adapter.supabase import MockIdentityProviderFactory
from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.registration import (
    StartRegistrationRequest,
    StartRegistrationUseCase,
    SubmitPasswordRequest,
    SubmitPasswordUseCase,
)
from yam.domain.error import NotFoundError
from yam.domain.model import RegistrationStatus
from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
)
from yam.domain.service import IdentityProviderFactory
from yam.domain.value import InvitationStatus
from tests.conftest import (
    make_invitation,
    make_mailroom,
    make_organization,
    make_session,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestPasswordPolicy:
    """Request validation."""

    def test_valid_request(self):
        request = SubmitPasswordRequest(
            flow_id="f", password="correct-horse", confirm_password="correct-horse"
        )

        assert request.password == "correct-horse"
        assert "correct-horse" not in repr(request)

    @pytest.mark.parametrize("password", ["short", "x" * 65])
    def test_length_limits(self, password):
        with pytest.raises(ValidationError):
            SubmitPasswordRequest(
                flow_id="f", password=password, confirm_password=password
            )

    def test_passwords_must_match(self):
        with pytest.raises(ValidationError, match="Passwords don't match"):
            SubmitPasswordRequest(
                flow_id="f", password="correct-horse", confirm_password="battery-staple"
            )


class TestSubmitPasswordUseCase:
    """Tests for SubmitPasswordUseCase."""

    @pytest.mark.asyncio
    async def test_activates_account(self, unit_env):
        organization = make_organization()
        mailroom = make_mailroom(organization.id)
        await (await unit_env.get(OrganizationRepository)).save(organization)
        await (await unit_env.get(MailroomRepository)).save(mailroom)
        invitation = make_invitation(
            organization_id=organization.id, mailroom_id=mailroom.id
        )
        invitation_repository = await unit_env.get(InvitationRepository)
        await invitation_repository.save(invitation)
        identities: MockIdentityProviderFactory = await unit_env.get(
            IdentityProviderFactory
        )
        identities.register("bearer", make_session())

        started = await (await unit_env.get(StartRegistrationUseCase)).execute(
            StartRegistrationRequest(
                url=f"https://app.useyam.com/register?token={invitation.token.root}",
                access_token="bearer",
            )
        )
        assert started.status == RegistrationStatus.READY_FOR_PASSWORD

        response = await (await unit_env.get(SubmitPasswordUseCase)).execute(
            SubmitPasswordRequest(
                flow_id=started.flow_id,
                password="correct-horse",
                confirm_password="correct-horse",
            )
        )

        assert response.status == RegistrationStatus.REDIRECTED
        assert response.redirect_path == "/tufts/carmichael/"
        assert response.is_terminal is True
        assert response.action is None
        stored = await invitation_repository.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.RESOLVED

    @pytest.mark.asyncio
    async def test_unknown_flow(self, unit_env):
        use_case = await unit_env.get(SubmitPasswordUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                SubmitPasswordRequest(
                    flow_id="missing",
                    password="correct-horse",
                    confirm_password="correct-horse",
                )
            )

    @pytest.mark.asyncio
    async def test_submit_on_invalid_flow_is_ignored(self, unit_env):
        registry = await unit_env.get(RegistrationFlowRegistry)
        flow = await registry.start("https://app.useyam.com/register")

        response = await (await unit_env.get(SubmitPasswordUseCase)).execute(
            SubmitPasswordRequest(
                flow_id=flow.id,
                password="correct-horse",
                confirm_password="correct-horse",
            )
        )

        assert response.status == RegistrationStatus.INVALID_INVITE
        assert response.action == "/login"
