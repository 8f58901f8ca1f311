"""Unit tests for InvitationService."""

import asyncio
from uuid import uuid4

import pytest

from yam.domain.error import BusinessRuleViolationError, NotFoundError
from yam.domain.repository import InvitationRepository
from yam.domain.service import InvitationService
from yam.persistence.repository.inmemory import InMemoryInvitationRepository
from yam.domain.value import InvitationId, InvitationStatus, InvitationToken
from tests.conftest import make_invitation
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


class TestGetInvitationByToken:
    @pytest.mark.asyncio
    async def test_found(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        invitation = make_invitation(token="abc")
        await (await unit_env.get(InvitationRepository)).save(invitation)

        result = await invitation_service.get_invitation_by_token(
            InvitationToken(root="abc")
        )

        assert result == invitation

    @pytest.mark.asyncio
    async def test_not_found(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)

        result = await invitation_service.get_invitation_by_token(
            InvitationToken(root="nope")
        )

        assert result is None


class TestResolveInvitation:
    @pytest.mark.asyncio
    async def test_resolves_pending_invitation(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        invitation_repo = await unit_env.get(InvitationRepository)
        invitation = make_invitation()
        await invitation_repo.save(invitation)

        result = await invitation_service.resolve_invitation(invitation.id)

        assert result.status == InvitationStatus.RESOLVED
        stored = await invitation_repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.RESOLVED
        assert stored.used_at is not None

    @pytest.mark.asyncio
    async def test_already_resolved(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        invitation = make_invitation(status=InvitationStatus.RESOLVED)
        await (await unit_env.get(InvitationRepository)).save(invitation)

        with pytest.raises(BusinessRuleViolationError):
            await invitation_service.resolve_invitation(invitation.id)

    @pytest.mark.asyncio
    async def test_unknown_invitation(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)

        with pytest.raises(NotFoundError):
            await invitation_service.resolve_invitation(InvitationId(uuid4()))


class TestFailInvitation:
    @pytest.mark.asyncio
    async def test_fails_pending_invitation(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        invitation = make_invitation()
        await (await unit_env.get(InvitationRepository)).save(invitation)

        result = await invitation_service.fail_invitation(invitation.id)

        assert result.status == InvitationStatus.FAILED


class RoundTripInvitationRepository(InMemoryInvitationRepository):
    """Yields to the event loop after each read, so a concurrent writer
    can act on the same snapshot, as with a database round trip."""

    async def find_by_id(self, invitation_id):
        invitation = await super().find_by_id(invitation_id)
        await asyncio.sleep(0)
        return invitation


class TestConcurrentSettlement:
    """Two flows settling the same invitation at once."""

    @pytest.mark.asyncio
    async def test_only_one_final_status_is_written(self):
        repo = RoundTripInvitationRepository()
        invitation_service = InvitationService(repo)
        invitation = make_invitation()
        await repo.save(invitation)

        results = await asyncio.gather(
            invitation_service.resolve_invitation(invitation.id),
            invitation_service.fail_invitation(invitation.id),
            return_exceptions=True,
        )

        resolved, failed = results
        assert resolved.status == InvitationStatus.RESOLVED
        assert isinstance(failed, BusinessRuleViolationError)
        stored = await repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.RESOLVED

    @pytest.mark.asyncio
    async def test_settled_invitation_is_not_overwritten(self, unit_env):
        repo = await unit_env.get(InvitationRepository)
        invitation = make_invitation()
        await repo.save(invitation)
        await repo.save(invitation.resolve())

        with pytest.raises(BusinessRuleViolationError):
            await repo.save(invitation.fail())

        stored = await repo.find_by_id(invitation.id)
        assert stored.status == InvitationStatus.RESOLVED
