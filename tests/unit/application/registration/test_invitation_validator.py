"""Tests for InvitationValidator."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from yam.application.registration import InvitationValidator
from yam.domain.error import (
    EmailMismatchError,
    InvitationExpiredError,
    InvitationLookupFailedError,
    InvitationNotFoundError,
    InvitationNotPendingError,
)
from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
)
from yam.domain.service import DirectoryService, InvitationService
from yam.domain.value import InvitationStatus, InvitationToken
from tests.conftest import (
    make_invitation,
    make_mailroom,
    make_organization,
    make_session,
)
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


async def build_validator(env, **kwargs) -> InvitationValidator:
    return InvitationValidator(
        await env.get(InvitationService), await env.get(DirectoryService), **kwargs
    )


class TestCheckInvitation:
    """Checks that need no identity."""

    @pytest.mark.asyncio
    async def test_pending_invitation_passes(self, unit_env):
        invitation = make_invitation()
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        result = await validator.check_invitation(invitation.token)

        assert result.id == invitation.id

    @pytest.mark.asyncio
    async def test_unknown_token(self, unit_env):
        validator = await build_validator(unit_env)

        with pytest.raises(InvitationNotFoundError) as exc_info:
            await validator.check_invitation(InvitationToken(root="nope"))

        assert (
            exc_info.value.message == "Invitation not found or already used/invalid."
        )

    @pytest.mark.parametrize(
        "status,message",
        [
            (InvitationStatus.RESOLVED, "This invitation has already been used."),
            (InvitationStatus.EXPIRED, "This invitation has expired."),
            (InvitationStatus.CANCELLED, "This invitation has been cancelled."),
            (
                InvitationStatus.FAILED,
                "This invitation is no longer valid (status: failed).",
            ),
        ],
    )
    @pytest.mark.asyncio
    async def test_non_pending_invitation(self, unit_env, status, message):
        invitation = make_invitation(status=status)
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(InvitationNotPendingError) as exc_info:
            await validator.check_invitation(invitation.token)

        assert exc_info.value.status == status
        assert exc_info.value.message == message

    @pytest.mark.asyncio
    async def test_expired_by_date_while_still_pending(self, unit_env):
        """Expiry is derived from expires_at, not the stored status."""
        invitation = make_invitation(expires_in=timedelta(minutes=-1))
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(InvitationExpiredError):
            await validator.check_invitation(invitation.token)

    @pytest.mark.asyncio
    async def test_uses_injected_clock(self, unit_env):
        invitation = make_invitation(expires_in=timedelta(days=1))
        await (await unit_env.get(InvitationRepository)).save(invitation)
        later = datetime.now(timezone.utc) + timedelta(days=2)
        validator = await build_validator(unit_env, clock=lambda: later)

        with pytest.raises(InvitationExpiredError):
            await validator.check_invitation(invitation.token)

    @pytest.mark.asyncio
    async def test_status_checked_before_expiry(self, unit_env):
        invitation = make_invitation(
            status=InvitationStatus.RESOLVED, expires_in=timedelta(days=-3)
        )
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(InvitationNotPendingError):
            await validator.check_invitation(invitation.token)

    @pytest.mark.asyncio
    async def test_lookup_failure(self, unit_env):
        invitation_service = AsyncMock(spec=InvitationService)
        invitation_service.get_invitation_by_token.side_effect = ConnectionError(
            "database down"
        )
        validator = InvitationValidator(
            invitation_service, await unit_env.get(DirectoryService)
        )

        with pytest.raises(InvitationLookupFailedError):
            await validator.check_invitation(InvitationToken(root="abc"))


class TestValidate:
    """Full validation with an identity."""

    @pytest.mark.asyncio
    async def test_resolves_display_names(self, unit_env):
        organization = make_organization()
        mailroom = make_mailroom(organization.id)
        await (await unit_env.get(OrganizationRepository)).save(organization)
        await (await unit_env.get(MailroomRepository)).save(mailroom)
        invitation = make_invitation(
            organization_id=organization.id, mailroom_id=mailroom.id
        )
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        resolved = await validator.validate(invitation.token, make_session())

        assert resolved.invitation_id == invitation.id
        assert resolved.organization_name == "Tufts University"
        assert resolved.mailroom_name == "Carmichael Hall"
        assert resolved.email == invitation.email

    @pytest.mark.asyncio
    async def test_email_comparison_ignores_case(self, unit_env):
        invitation = make_invitation(email="Alice@Example.com")
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        resolved = await validator.validate(
            invitation.token, make_session(email="alice@example.COM")
        )

        assert resolved.invitation_id == invitation.id

    @pytest.mark.asyncio
    async def test_email_mismatch(self, unit_env):
        invitation = make_invitation(email="alice@example.com")
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(EmailMismatchError):
            await validator.validate(
                invitation.token, make_session(email="mallory@example.com")
            )

    @pytest.mark.asyncio
    async def test_session_without_email_is_a_mismatch(self, unit_env):
        invitation = make_invitation()
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(EmailMismatchError):
            await validator.validate(invitation.token, make_session(email=None))

    @pytest.mark.asyncio
    async def test_record_checks_run_before_email(self, unit_env):
        """An expired invitation reports expiry even for the wrong identity."""
        invitation = make_invitation(expires_in=timedelta(hours=-1))
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        with pytest.raises(InvitationExpiredError):
            await validator.validate(
                invitation.token, make_session(email="mallory@example.com")
            )

    @pytest.mark.asyncio
    async def test_missing_directory_entries_use_fallback_names(self, unit_env):
        invitation = make_invitation()
        await (await unit_env.get(InvitationRepository)).save(invitation)
        validator = await build_validator(unit_env)

        resolved = await validator.validate(invitation.token, make_session())

        assert resolved.organization_name == (
            f"Unknown Organization ({invitation.organization_id})"
        )
        assert resolved.mailroom_name == f"Unknown Mailroom ({invitation.mailroom_id})"

    @pytest.mark.asyncio
    async def test_directory_failure_does_not_block(self, unit_env):
        invitation = make_invitation()
        await (await unit_env.get(InvitationRepository)).save(invitation)
        directory_service = AsyncMock(spec=DirectoryService)
        directory_service.get_organization.side_effect = RuntimeError("boom")
        directory_service.get_mailroom.side_effect = RuntimeError("boom")
        validator = InvitationValidator(
            await unit_env.get(InvitationService), directory_service
        )

        resolved = await validator.validate(invitation.token, make_session())

        assert resolved.organization_name.startswith("Unknown Organization")
        assert resolved.mailroom_name.startswith("Unknown Mailroom")
