"""PostgreSQL implementation of Invitation repository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from yam.domain.error import BusinessRuleViolationError
from yam.domain.model import Invitation
from yam.domain.repository import InvitationRepository
from yam.domain.value import InvitationId, InvitationStatus, InvitationToken
from yam.persistence.database import transaction
from yam.persistence.mappers import invitation_to_dict, row_to_invitation
from yam.persistence.tables import invitations_table


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: Invitation ID to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token.

        Args:
            token: Invitation token to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.token == token.root)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def save(self, invitation: Invitation) -> Invitation:
        """Persist an invitation's status change.

        Invitations are issued elsewhere, so only updates are supported.
        The UPDATE is conditional on the stored status still being
        PENDING; a concurrent flow that settled it first wins.

        Args:
            invitation: Invitation to save

        Returns:
            Saved invitation

        Raises:
            LookupError: If the invitation row does not exist
            BusinessRuleViolationError: If the invitation already left PENDING
        """
        stmt = (
            update(invitations_table)
            .where(invitations_table.c.id == invitation.id)
            .where(invitations_table.c.status == InvitationStatus.PENDING.value)
            .values(**invitation_to_dict(invitation))
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                current = await session.scalar(
                    select(invitations_table.c.status).where(
                        invitations_table.c.id == invitation.id
                    )
                )
                if current is None:
                    raise LookupError(f"Invitation {invitation.id} does not exist")
                raise BusinessRuleViolationError(
                    f"Invitation {invitation.id} is already {current}"
                )
        return invitation
