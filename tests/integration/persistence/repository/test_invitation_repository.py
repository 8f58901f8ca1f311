"""Integration tests for PostgresInvitationRepository.

These run against a local Supabase database (`supabase start`) and are
skipped unless DATABASE__URL is set.
"""

import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import delete, insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from yam.domain.error import BusinessRuleViolationError
from yam.domain.repository import InvitationRepository
from yam.domain.value import InvitationId, InvitationStatus, InvitationToken
from yam.persistence.tables import (
    invitations_table,
    mailrooms_table,
    organizations_table,
)
from tests.harness import create_env_fixture

pytestmark = pytest.mark.skipif(
    "DATABASE__URL" not in os.environ, reason="requires a running database"
)

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


@pytest_asyncio.fixture
async def seeded(integration_env):
    """Insert an organization, a mailroom and a pending invitation."""
    session_factory = await integration_env.get(async_sessionmaker[AsyncSession])
    suffix = uuid4().hex[:8]
    organization_id = uuid4()
    mailroom_id = uuid4()
    invitation_id = uuid4()
    token = f"it-token-{suffix}"

    async with session_factory() as session:
        await session.execute(
            insert(organizations_table).values(
                id=organization_id, name="Integration Org", slug=f"it-org-{suffix}"
            )
        )
        await session.execute(
            insert(mailrooms_table).values(
                id=mailroom_id,
                organization_id=organization_id,
                name="Integration Mailroom",
                slug=f"it-mailroom-{suffix}",
            )
        )
        await session.execute(
            insert(invitations_table).values(
                id=invitation_id,
                email="integration@example.com",
                organization_id=organization_id,
                mailroom_id=mailroom_id,
                token=token,
                expires_at=datetime.now(timezone.utc) + timedelta(days=7),
            )
        )
        await session.commit()

    yield InvitationId(invitation_id), InvitationToken(root=token)

    # Mailrooms and invitations cascade
    async with session_factory() as session:
        await session.execute(
            delete(organizations_table).where(
                organizations_table.c.id == organization_id
            )
        )
        await session.commit()


class TestInvitationRepositoryIntegration:
    """Database interaction and value object handling."""

    @pytest.mark.asyncio
    async def test_find_by_token(self, integration_env, seeded):
        invitation_id, token = seeded
        repo = await integration_env.get(InvitationRepository)

        invitation = await repo.find_by_token(token)

        assert invitation is not None
        assert invitation.id == invitation_id
        assert invitation.status == InvitationStatus.PENDING
        assert invitation.email.root == "integration@example.com"
        assert invitation.expires_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_find_by_unknown_token(self, integration_env):
        repo = await integration_env.get(InvitationRepository)

        assert await repo.find_by_token(InvitationToken(root="no-such-token")) is None

    @pytest.mark.asyncio
    async def test_resolve_is_persisted(self, integration_env, seeded):
        invitation_id, token = seeded
        repo = await integration_env.get(InvitationRepository)
        invitation = await repo.find_by_id(invitation_id)

        await repo.save(invitation.resolve())

        stored = await repo.find_by_token(token)
        assert stored.status == InvitationStatus.RESOLVED
        assert stored.used_at is not None

    @pytest.mark.asyncio
    async def test_save_unknown_invitation(self, integration_env, seeded):
        invitation_id, _ = seeded
        repo = await integration_env.get(InvitationRepository)
        invitation = await repo.find_by_id(invitation_id)

        with pytest.raises(LookupError):
            await repo.save(invitation.model_copy(update={"id": InvitationId(uuid4())}))

    @pytest.mark.asyncio
    async def test_settled_invitation_is_not_overwritten(self, integration_env, seeded):
        invitation_id, token = seeded
        repo = await integration_env.get(InvitationRepository)
        pending = await repo.find_by_id(invitation_id)
        await repo.save(pending.resolve())

        # A second flow still holding the PENDING snapshot
        with pytest.raises(BusinessRuleViolationError):
            await repo.save(pending.fail())

        stored = await repo.find_by_token(token)
        assert stored.status == InvitationStatus.RESOLVED
